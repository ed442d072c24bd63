from typing import Optional

from converter import PrimitiveConverter
from membuffer import MemoryBuffer
from readers import HOST_LITTLE_ENDIAN


class MemoryBufferWriter:
    """Encodes fixed-width primitives into a :class:`MemoryBuffer`.

    The writer keeps no cursor of its own: every write grows the buffer by
    exactly the encoded width and fills the bytes just allocated, so
    ``buffer.position`` always marks the end of the written data.

    :ivar buffer: Destination buffer (not owned).
    :type buffer: MemoryBuffer
    :ivar little_endian: Default byte order for multi-byte writes.
    :type little_endian: bool
    """

    def __init__(
        self, buffer: MemoryBuffer, little_endian: Optional[bool] = None
    ):
        """Attach the writer to ``buffer``.

        :param buffer: Destination buffer.
        :type buffer: MemoryBuffer
        :param little_endian: Default byte order; ``None`` means the host's.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        :raises TypeError: If ``buffer`` is ``None``.
        """
        if buffer is None:
            raise TypeError("buffer must not be None")
        if little_endian is None:
            little_endian = HOST_LITTLE_ENDIAN
        self.buffer = buffer
        self.little_endian = little_endian

    def write(self, data, offset: int = 0, count: Optional[int] = None) -> None:
        """Append ``count`` raw bytes of ``data`` starting at ``offset``.

        The range is validated before the buffer is touched.

        :param data: Bytes-like source.
        :param offset: First byte of ``data`` to copy.
        :type offset: int
        :param count: Number of bytes; defaults to the rest of ``data``.
        :type count: Optional[int]
        :returns: None
        :rtype: None
        :raises TypeError: If ``data`` is ``None``.
        :raises ValueError: If ``offset``/``count`` do not describe a range
            inside ``data``.
        """
        if data is None:
            raise TypeError("data must not be None")
        if offset < 0:
            raise ValueError(f"Invalid offset: {offset}")
        if count is None:
            count = len(data) - offset
        if count < 0:
            raise ValueError(f"Invalid count: {count}")
        if len(data) - offset < count:
            raise ValueError(
                f"Range {offset}+{count} exceeds source length {len(data)}"
            )

        chunk = bytes(data[offset:offset + count])
        self.buffer.ensure_capacity_and_advance(count)
        end = self.buffer.position
        self.buffer.array[end - count:end] = chunk

    def _write_integer(
        self, value: int, byte_count: int, little_endian: Optional[bool]
    ) -> None:
        """Grow the buffer by ``byte_count`` and store ``value`` there.

        Byte ``i`` of the value (from the least significant end) lands at
        ``start + i`` in little-endian order and at
        ``start + byte_count - 1 - i`` in big-endian order. Bits above the
        width are dropped.

        :param value: Integer to encode.
        :type value: int
        :param byte_count: Width in bytes.
        :type byte_count: int
        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        """
        if little_endian is None:
            little_endian = self.little_endian

        encoded = [(value >> (i << 3)) & 0xFF for i in range(byte_count)]

        self.buffer.ensure_capacity_and_advance(byte_count)
        array = self.buffer.array
        position = self.buffer.position

        for i, byte in enumerate(encoded):
            index = position - (byte_count - i if little_endian else i + 1)
            array[index] = byte

    def write_byte(self, value: int) -> None:
        byte = PrimitiveConverter.to_byte(value)
        self.buffer.ensure_capacity_and_advance(1)
        self.buffer.array[self.buffer.position - 1] = byte

    def write_sbyte(self, value: int) -> None:
        self.write_byte(PrimitiveConverter.to_byte(value))

    def write_int16(self, value: int, little_endian: Optional[bool] = None) -> None:
        self._write_integer(value, 2, little_endian)

    def write_uint16(self, value: int, little_endian: Optional[bool] = None) -> None:
        self.write_int16(PrimitiveConverter.to_int16(value), little_endian)

    def write_int32(self, value: int, little_endian: Optional[bool] = None) -> None:
        self._write_integer(value, 4, little_endian)

    def write_uint32(self, value: int, little_endian: Optional[bool] = None) -> None:
        self.write_int32(PrimitiveConverter.to_int32(value), little_endian)

    def write_int64(self, value: int, little_endian: Optional[bool] = None) -> None:
        self._write_integer(value, 8, little_endian)

    def write_uint64(self, value: int, little_endian: Optional[bool] = None) -> None:
        self.write_int64(PrimitiveConverter.to_int64(value), little_endian)

    def write_single(self, value: float, little_endian: Optional[bool] = None) -> None:
        """Write ``value`` as a binary32 float (via its bit pattern).

        :param value: Value to encode; rounded to single precision.
        :type value: float
        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        """
        self.write_int32(PrimitiveConverter.to_int32_bits(value), little_endian)

    def write_double(self, value: float, little_endian: Optional[bool] = None) -> None:
        """Write ``value`` as a binary64 float (via its bit pattern).

        :param value: Value to encode.
        :type value: float
        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        """
        self.write_int64(PrimitiveConverter.to_int64_bits(value), little_endian)
