import ctypes
from abc import ABC, abstractmethod


class PinnedArray(ABC):
    """Fixed block of memory with a stable address for native calls.

    Instances are scoped resources: use them in a ``with`` block, or call
    :meth:`release` explicitly. After release every access raises
    :class:`ValueError`.

    :ivar released: ``True`` once :meth:`release` has run.
    :type released: bool
    """

    def __init__(self, length: int):
        self.length = length
        self.released = False

    def _check_alive(self) -> None:
        if self.released:
            raise ValueError(f"{type(self).__name__} has been released")

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.length:
            raise IndexError(f"Index {index} out of range")

    @property
    @abstractmethod
    def address(self) -> int:
        """Base address of the memory block."""

    @abstractmethod
    def release(self) -> None:
        """Give up the memory block; idempotent."""

    def __len__(self) -> int:
        return self.length

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()


class ManagedPinnedArray(PinnedArray):
    """Pins a writable bytes-like object in place.

    While pinned, a ``bytearray`` cannot be resized (its buffer is exported
    to ``ctypes``), so :attr:`address` stays valid until :meth:`release`.

    :ivar array: The pinned object.
    """

    def __init__(self, array):
        """Pin ``array``.

        :param array: Writable bytes-like object (``bytearray``,
            ``memoryview`` of one, ``array.array``...).
        :returns: None
        :rtype: None
        :raises TypeError: If ``array`` is ``None`` or read-only.
        """
        if array is None:
            raise TypeError("array must not be None")
        view = memoryview(array)
        super().__init__(len(view))
        self.array = array
        self._view = view
        self._handle = (ctypes.c_ubyte * view.nbytes).from_buffer(array)

    @property
    def address(self) -> int:
        self._check_alive()
        return ctypes.addressof(self._handle)

    def __getitem__(self, index: int):
        self._check_index(index)
        return self.array[index]

    def __setitem__(self, index: int, value) -> None:
        self._check_index(index)
        self.array[index] = value

    def release(self) -> None:
        """Unpin the array; further calls are no-ops."""
        if self.released:
            return
        self._handle = None
        self._view.release()
        self.released = True


class UnmanagedPinnedArray(PinnedArray):
    """Array of ``ctypes`` items outside of any Python container.

    Either allocates (and owns) a zeroed block of ``length`` items, or wraps
    foreign memory via :meth:`from_address`, in which case releasing it only
    drops the reference.

    :ivar ctype: Item type (``ctypes.c_ubyte``, ``ctypes.c_int32``...).
    :ivar owns_handle: Whether the block was allocated by this object.
    :type owns_handle: bool
    """

    def __init__(self, length: int, ctype=ctypes.c_ubyte):
        """Allocate ``length`` zeroed items of ``ctype``.

        :param length: Number of items.
        :type length: int
        :param ctype: ``ctypes`` scalar type of one item.
        :returns: None
        :rtype: None
        :raises ValueError: If ``length`` is negative.
        """
        if length < 0:
            raise ValueError(f"Invalid length: {length}")
        super().__init__(length)
        self.ctype = ctype
        self.owns_handle = True
        self._data = (ctype * length)()

    @classmethod
    def from_address(cls, address: int, length: int, ctype=ctypes.c_ubyte):
        """Wrap ``length`` items of ``ctype`` living at ``address``.

        The caller keeps ownership of the memory and must keep it alive for
        as long as the wrapper is used.

        :param address: Base address of existing memory.
        :type address: int
        :param length: Number of items.
        :type length: int
        :param ctype: ``ctypes`` scalar type of one item.
        :returns: Non-owning wrapper.
        :rtype: UnmanagedPinnedArray
        :raises ValueError: If ``address`` is null or ``length`` is negative.
        """
        if length < 0:
            raise ValueError(f"Invalid length: {length}")
        if not address:
            raise ValueError("Null address")
        obj = cls.__new__(cls)
        PinnedArray.__init__(obj, length)
        obj.ctype = ctype
        obj.owns_handle = False
        obj._data = (ctype * length).from_address(address)
        return obj

    @property
    def address(self) -> int:
        self._check_alive()
        return ctypes.addressof(self._data)

    def __getitem__(self, index: int):
        self._check_alive()
        self._check_index(index)
        return self._data[index]

    def __setitem__(self, index: int, value) -> None:
        self._check_alive()
        self._check_index(index)
        self._data[index] = value

    def release(self) -> None:
        """Drop the memory block; owned memory is freed with it."""
        if self.released:
            return
        self._data = None
        self.released = True
