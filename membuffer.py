from collections.abc import MutableSequence
from typing import Iterable, Iterator, Optional

MIN_BUFFER_SIZE = 4  #: Smallest capacity a buffer ever has
MAX_BUFFER_SIZE = 1073741824  #: Hard capacity ceiling (1 GiB)


def _power_of_two_length(current: int, required: int) -> int:
    """Double ``current`` until it is at least ``required``.

    :param current: Starting length (a power of two).
    :type current: int
    :param required: Minimal length needed.
    :type required: int
    :returns: Smallest ``current * 2**k`` that is ``>= required``.
    :rtype: int
    """
    length = current
    while length < required:
        length <<= 1
    return length


class MemoryBuffer(MutableSequence):
    """Growable byte vector with direct access to its backing storage.

    The backing ``bytearray`` always has a power-of-two length. Only the
    first ``position`` bytes are considered written; the sequence protocol
    (``len``, indexing, iteration) covers exactly that region.

    Growth replaces :attr:`array` with a larger ``bytearray``. Any reference
    or ``memoryview`` taken from it before a mutating call may be stale
    afterwards.

    :ivar array: Backing storage (length is the capacity).
    :type array: bytearray
    :ivar position: Number of written bytes (``<= len(array)``).
    :type position: int
    """

    def __init__(self, size: int = 0):
        """Create a buffer able to hold at least ``size`` bytes.

        :param size: Minimal initial capacity.
        :type size: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``size`` is negative or above
            :data:`MAX_BUFFER_SIZE`.
        """
        if size < 0 or size > MAX_BUFFER_SIZE:
            raise ValueError(f"Invalid buffer size: {size}")
        self.array = bytearray(_power_of_two_length(MIN_BUFFER_SIZE, size))
        self.position = 0

    @property
    def capacity(self) -> int:
        """Length of the backing storage."""
        return len(self.array)

    def set_position(self, value: int) -> None:
        """Move the write cursor without touching the storage contents.

        Bytes between the old and the new position keep whatever value they
        had; they are not cleared.

        :param value: New position.
        :type value: int
        :returns: None
        :rtype: None
        :raises IndexError: If ``value`` is outside ``[0, capacity]``.
        """
        if value < 0 or value > len(self.array):
            raise IndexError(f"Position {value} out of range")
        self.position = value

    def ensure_capacity_and_advance(self, required_space: int) -> None:
        """Make room for ``required_space`` bytes and advance the position.

        Capacity is doubled until ``position + required_space`` fits, the
        written bytes are copied over, then ``position`` moves forward by
        ``required_space``. On failure nothing is changed.

        :param required_space: Number of bytes to advance by.
        :type required_space: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``required_space`` is negative or the result
            would exceed :data:`MAX_BUFFER_SIZE`.
        """
        required = self.position + required_space
        if required_space < 0 or required > MAX_BUFFER_SIZE:
            raise ValueError(f"Cannot allocate {required_space} bytes")

        if len(self.array) < required:
            new_array = bytearray(_power_of_two_length(len(self.array), required))
            new_array[:self.position] = self.array[:self.position]
            self.array = new_array

        self.position = required

    allocate_space = ensure_capacity_and_advance

    def getbuffer(self) -> memoryview:
        """Return a view of the written bytes.

        The view is only meaningful until the next mutating call; release it
        before growing the buffer again.

        :returns: ``memoryview`` over ``array[:position]``.
        :rtype: memoryview
        """
        return memoryview(self.array)[:self.position]

    def to_bytes(self) -> bytes:
        """Copy the written region into an immutable ``bytes`` object."""
        return bytes(self.array[:self.position])

    def copy_to(self, target, target_index: int = 0) -> None:
        """Copy the written bytes into ``target`` starting at ``target_index``.

        :param target: Mutable bytes-like destination.
        :type target: bytearray
        :param target_index: First index written in ``target``.
        :type target_index: int
        :returns: None
        :rtype: None
        :raises TypeError: If ``target`` is ``None``.
        :raises IndexError: If ``target_index`` is outside ``[0, len(target)]``.
        :raises ValueError: If ``target`` has no room for all written bytes.
        """
        if target is None:
            raise TypeError("target must not be None")
        if target_index < 0 or target_index > len(target):
            raise IndexError(f"Target index {target_index} out of range")
        if self.position > len(target) - target_index:
            raise ValueError("Target is too small")
        target[target_index:target_index + self.position] = (
            self.array[:self.position]
        )

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.position:
            raise IndexError(f"Index {index} out of range")

    def __len__(self) -> int:
        return self.position

    def __getitem__(self, index):
        if isinstance(index, slice):
            return bytes(self.array[i] for i in range(self.position)[index])
        self._check_index(index)
        return self.array[index]

    def __setitem__(self, index: int, value: int) -> None:
        if isinstance(index, slice):
            raise TypeError("MemoryBuffer does not support slice assignment")
        self._check_index(index)
        self.array[index] = value

    def __delitem__(self, index: int) -> None:
        if isinstance(index, slice):
            raise TypeError("MemoryBuffer does not support slice deletion")
        self.remove_at(index)

    def __iter__(self) -> Iterator[int]:
        for i in range(self.position):
            yield self.array[i]

    def __contains__(self, value) -> bool:
        if isinstance(value, int) and not 0 <= value <= 0xFF:
            return False
        return self.array.find(value, 0, self.position) >= 0

    def __repr__(self) -> str:
        return (
            f"MemoryBuffer(position={self.position}, "
            f"capacity={len(self.array)})"
        )

    def append(self, value: int) -> None:
        """Add a byte after the last written one, growing if needed.

        :param value: Byte value (0-255).
        :type value: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``value`` is not a byte or the buffer is full.
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        self.ensure_capacity_and_advance(1)
        self.array[self.position - 1] = value

    def extend(self, values: Iterable[int]) -> None:
        if isinstance(values, int):
            raise TypeError("extend() needs an iterable of bytes")
        data = bytes(values)
        self.ensure_capacity_and_advance(len(data))
        self.array[self.position - len(data):self.position] = data

    def insert(self, index: int, value: int) -> None:
        """Insert a byte at ``index``, shifting the following bytes right.

        :param index: Position in ``[0, position]``.
        :type index: int
        :param value: Byte value (0-255).
        :type value: int
        :returns: None
        :rtype: None
        :raises IndexError: If ``index`` is outside ``[0, position]``.
        """
        if index < 0 or index > self.position:
            raise IndexError(f"Index {index} out of range")
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        self.ensure_capacity_and_advance(1)
        if index < self.position - 1:
            self.array[index + 1:self.position] = self.array[index:self.position - 1]
        self.array[index] = value

    def remove_at(self, index: int) -> None:
        """Remove the byte at ``index``, shifting the following bytes left.

        :param index: Position in ``[0, position)``.
        :type index: int
        :returns: None
        :rtype: None
        :raises IndexError: If ``index`` is outside ``[0, position)``.
        """
        self._check_index(index)
        self.position -= 1
        if index < self.position:
            self.array[index:self.position] = self.array[index + 1:self.position + 1]

    def index(self, value, start: int = 0, stop: Optional[int] = None) -> int:
        if stop is None or stop > self.position:
            stop = self.position
        found = self.array.find(value, max(start, 0), stop)
        if found < 0:
            raise ValueError(f"{value} is not in buffer")
        return found

    def pop(self, index: Optional[int] = None) -> int:
        if index is None:
            index = self.position - 1
        value = self[index]
        self.remove_at(index)
        return value

    def clear(self) -> None:
        """Forget all written bytes; capacity is kept."""
        self.position = 0
