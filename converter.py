import math
import struct


class PrimitiveConverter:
    """Unchecked conversions between fixed-width primitives.

    Every method reinterprets a bit pattern; none of them performs a numeric
    conversion or a range check. Integer arguments are reduced modulo
    ``2**width`` first, so any ``int`` is accepted and simply wraps.
    """

    @staticmethod
    def _signed(value: int, nbits: int) -> int:
        """Reduce ``value`` to ``nbits`` and read it as two's complement.

        :param value: Integer to reinterpret.
        :type value: int
        :param nbits: Bit width of the target type.
        :type nbits: int
        :returns: Signed value in ``[-2**(nbits-1), 2**(nbits-1))``.
        :rtype: int
        """
        sign = 1 << (nbits - 1)
        return ((value & ((1 << nbits) - 1)) ^ sign) - sign

    @staticmethod
    def _unsigned(value: int, nbits: int) -> int:
        return value & ((1 << nbits) - 1)

    @staticmethod
    def to_single(value: int) -> float:
        """Interpret the low 32 bits of ``value`` as an IEEE-754 binary32.

        :param value: 32-bit integer bit pattern.
        :type value: int
        :returns: The float with that bit pattern.
        :rtype: float
        """
        return struct.unpack("<f", struct.pack("<I", value & 0xFFFFFFFF))[0]

    @staticmethod
    def to_int32_bits(value: float) -> int:
        """Return the binary32 bit pattern of ``value`` as a signed int32.

        ``value`` is rounded to single precision first; magnitudes beyond the
        binary32 range become infinities of the same sign.

        :param value: Floating point value.
        :type value: float
        :returns: Signed 32-bit integer with the same bits.
        :rtype: int
        """
        try:
            packed = struct.pack("<f", value)
        except OverflowError:
            packed = struct.pack("<f", math.copysign(math.inf, value))
        return struct.unpack("<i", packed)[0]

    @staticmethod
    def to_double(value: int) -> float:
        """Interpret the low 64 bits of ``value`` as an IEEE-754 binary64.

        :param value: 64-bit integer bit pattern.
        :type value: int
        :returns: The float with that bit pattern.
        :rtype: float
        """
        return struct.unpack(
            "<d", struct.pack("<Q", value & 0xFFFFFFFFFFFFFFFF)
        )[0]

    @staticmethod
    def to_int64_bits(value: float) -> int:
        """Return the binary64 bit pattern of ``value`` as a signed int64.

        :param value: Floating point value.
        :type value: float
        :returns: Signed 64-bit integer with the same bits.
        :rtype: int
        """
        return struct.unpack("<q", struct.pack("<d", value))[0]

    @staticmethod
    def to_int16(value: int) -> int:
        return PrimitiveConverter._signed(value, 16)

    @staticmethod
    def to_uint16(value: int) -> int:
        return PrimitiveConverter._unsigned(value, 16)

    @staticmethod
    def to_int32(value: int) -> int:
        return PrimitiveConverter._signed(value, 32)

    @staticmethod
    def to_uint32(value: int) -> int:
        return PrimitiveConverter._unsigned(value, 32)

    @staticmethod
    def to_int64(value: int) -> int:
        """Reinterpret a uint64 as an int64 over the full 64 bits.

        :param value: Unsigned 64-bit value.
        :type value: int
        :returns: Signed 64-bit value with the same bits.
        :rtype: int
        """
        return PrimitiveConverter._signed(value, 64)

    @staticmethod
    def to_uint64(value: int) -> int:
        return PrimitiveConverter._unsigned(value, 64)

    @staticmethod
    def to_sbyte(value: int) -> int:
        return PrimitiveConverter._signed(value, 8)

    @staticmethod
    def to_byte(value: int) -> int:
        return PrimitiveConverter._unsigned(value, 8)
