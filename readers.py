import sys
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from converter import PrimitiveConverter

HOST_LITTLE_ENDIAN = sys.byteorder == "little"  #: Native byte order of the host


class BinaryReader(ABC):
    """Sequential decoder of fixed-width primitives over a byte source.

    Subclasses only say where the bytes come from (:meth:`_bound` and
    :meth:`_byte_at`); all decoding lives here. A read that would run past
    the bound raises :class:`EOFError` and leaves :attr:`offset` untouched.

    :ivar little_endian: Default byte order for multi-byte reads.
    :type little_endian: bool
    :ivar offset: Index of the next byte to read.
    :type offset: int
    """

    def __init__(self, little_endian: Optional[bool] = None):
        """Set the default byte order and rewind the cursor.

        :param little_endian: Default byte order; ``None`` means the host's.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        """
        if little_endian is None:
            little_endian = HOST_LITTLE_ENDIAN
        self.little_endian = little_endian
        self.offset = 0

    @abstractmethod
    def _bound(self) -> int:
        """Number of readable bytes in the source."""

    @abstractmethod
    def _byte_at(self, index: int) -> int:
        """Byte value at ``index`` (already bounds-checked)."""

    def _slice(self, start: int, count: int) -> bytes:
        return bytes(self._byte_at(start + i) for i in range(count))

    @property
    def length(self) -> int:
        """Number of readable bytes in the source."""
        return self._bound()

    @property
    def remaining(self) -> int:
        """Bytes left between :attr:`offset` and the bound."""
        return self._bound() - self.offset

    def set_position(self, value: int) -> None:
        """Move the read cursor.

        :param value: New offset.
        :type value: int
        :returns: None
        :rtype: None
        :raises IndexError: If ``value`` is outside ``[0, length]``.
        """
        if value < 0 or value > self._bound():
            raise IndexError(f"Position {value} out of range")
        self.offset = value

    def _require(self, count: int) -> None:
        if self.offset + count > self._bound():
            raise EOFError(
                f"Cannot read {count} bytes at offset {self.offset}"
            )

    def _read_integer(self, byte_count: int, little_endian: Optional[bool]) -> int:
        """Assemble ``byte_count`` bytes into an unsigned integer.

        Byte ``i`` of the value (counting from the least significant end) is
        taken from ``offset + i`` in little-endian order and from
        ``offset + byte_count - 1 - i`` in big-endian order.

        :param byte_count: Width of the value in bytes.
        :type byte_count: int
        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: Unsigned value.
        :rtype: int
        :raises EOFError: If fewer than ``byte_count`` bytes remain.
        """
        if little_endian is None:
            little_endian = self.little_endian
        self._require(byte_count)

        result = 0
        for i in range(byte_count):
            index = i if little_endian else byte_count - 1 - i
            result |= self._byte_at(self.offset + index) << (i << 3)

        self.offset += byte_count
        return result

    def read_byte(self) -> int:
        """Read one unsigned byte.

        :returns: Value in ``[0, 255]``.
        :rtype: int
        :raises EOFError: If the source is exhausted.
        """
        self._require(1)
        result = self._byte_at(self.offset)
        self.offset += 1
        return result

    def read_sbyte(self) -> int:
        return PrimitiveConverter.to_sbyte(self.read_byte())

    def read_bytes(self, count: int) -> bytes:
        """Read ``count`` raw bytes verbatim.

        :param count: Number of bytes to read.
        :type count: int
        :returns: The bytes read.
        :rtype: bytes
        :raises ValueError: If ``count`` is negative.
        :raises EOFError: If fewer than ``count`` bytes remain.
        """
        if count < 0:
            raise ValueError(f"Invalid byte count: {count}")
        self._require(count)
        result = self._slice(self.offset, count)
        self.offset += count
        return result

    def read_int16(self, little_endian: Optional[bool] = None) -> int:
        return PrimitiveConverter.to_int16(self._read_integer(2, little_endian))

    def read_uint16(self, little_endian: Optional[bool] = None) -> int:
        return self._read_integer(2, little_endian)

    def read_int32(self, little_endian: Optional[bool] = None) -> int:
        return PrimitiveConverter.to_int32(self._read_integer(4, little_endian))

    def read_uint32(self, little_endian: Optional[bool] = None) -> int:
        return self._read_integer(4, little_endian)

    def read_int64(self, little_endian: Optional[bool] = None) -> int:
        return PrimitiveConverter.to_int64(self._read_integer(8, little_endian))

    def read_uint64(self, little_endian: Optional[bool] = None) -> int:
        return self._read_integer(8, little_endian)

    def read_single(self, little_endian: Optional[bool] = None) -> float:
        """Read a binary32 float via its 32-bit pattern.

        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: The decoded float.
        :rtype: float
        :raises EOFError: If fewer than 4 bytes remain.
        """
        return PrimitiveConverter.to_single(self.read_int32(little_endian))

    def read_double(self, little_endian: Optional[bool] = None) -> float:
        """Read a binary64 float via its 64-bit pattern.

        :param little_endian: Byte order; ``None`` means the default.
        :type little_endian: Optional[bool]
        :returns: The decoded float.
        :rtype: float
        :raises EOFError: If fewer than 8 bytes remain.
        """
        return PrimitiveConverter.to_double(self.read_int64(little_endian))


class ArrayReader(BinaryReader):
    """Reads a bytes-like array as a binary stream.

    The readable length is fixed at construction and may be shorter than
    the array, e.g. ``ArrayReader(buf.array, buf.position)``.

    :ivar array: Source bytes (``bytes``, ``bytearray`` or ``memoryview``).
    """

    def __init__(
        self,
        array,
        length: Optional[int] = None,
        little_endian: Optional[bool] = None,
    ):
        """Wrap ``array``.

        :param array: Bytes-like source.
        :param length: Readable length; defaults to ``len(array)``.
        :type length: Optional[int]
        :param little_endian: Default byte order; ``None`` means the host's.
        :type little_endian: Optional[bool]
        :returns: None
        :rtype: None
        :raises TypeError: If ``array`` is ``None``.
        :raises IndexError: If ``length`` is outside ``[0, len(array)]``.
        """
        if array is None:
            raise TypeError("array must not be None")
        if length is None:
            length = len(array)
        if length < 0 or length > len(array):
            raise IndexError(f"Length {length} out of range")
        super().__init__(little_endian)
        self.array = array
        self._length = length

    def _bound(self) -> int:
        return self._length

    def _byte_at(self, index: int) -> int:
        return self.array[index]

    def _slice(self, start: int, count: int) -> bytes:
        return bytes(self.array[start:start + count])


class BinaryListReader(BinaryReader):
    """Reads any indexable sequence of byte values as a binary stream.

    The bound is ``len(source)`` at the time of each read, so a reader over
    a :class:`~membuffer.MemoryBuffer` follows bytes appended later.

    :ivar source: Sequence of ints in ``[0, 255]``.
    :type source: Sequence[int]
    """

    def __init__(
        self,
        source: Sequence[int],
        little_endian: Optional[bool] = None,
    ):
        if source is None:
            raise TypeError("source must not be None")
        super().__init__(little_endian)
        self.source = source

    def _bound(self) -> int:
        return len(self.source)

    def _byte_at(self, index: int) -> int:
        return self.source[index]
