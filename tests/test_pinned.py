import ctypes

import pytest

from pinned import ManagedPinnedArray, PinnedArray, UnmanagedPinnedArray


def test_managed_array_is_pinned_until_release():
    data = bytearray(b"abcd")
    with ManagedPinnedArray(data) as pinned:
        assert len(pinned) == 4
        assert ctypes.string_at(pinned.address, 4) == b"abcd"
        pinned[0] = ord("z")
        assert data[0] == ord("z")
        with pytest.raises(BufferError):
            data.append(0)
        with pytest.raises(IndexError):
            _ = pinned[4]
    assert pinned.released
    with pytest.raises(ValueError):
        _ = pinned.address
    data.append(0)
    assert data == bytearray(b"zbcd\x00")


def test_managed_array_rejects_read_only_source():
    with pytest.raises(TypeError):
        ManagedPinnedArray(b"abc")
    with pytest.raises(TypeError):
        ManagedPinnedArray(None)


def test_unmanaged_array_owns_zeroed_memory():
    with UnmanagedPinnedArray(3, ctypes.c_int32) as arr:
        assert [arr[i] for i in range(3)] == [0, 0, 0]
        arr[1] = -7
        assert ctypes.c_int32.from_address(arr.address + 4).value == -7
        assert arr.owns_handle
    with pytest.raises(ValueError):
        _ = arr[0]
    with pytest.raises(ValueError):
        arr[0] = 1
    arr.release()


def test_unmanaged_array_wraps_foreign_memory():
    backing = (ctypes.c_ubyte * 4)(1, 2, 3, 4)
    arr = UnmanagedPinnedArray.from_address(ctypes.addressof(backing), 4)
    assert not arr.owns_handle
    assert arr[3] == 4
    arr[0] = 9
    assert backing[0] == 9
    with pytest.raises(IndexError):
        arr[4] = 0
    arr.release()
    assert backing[1] == 2


def test_unmanaged_array_invalid_arguments():
    with pytest.raises(ValueError):
        UnmanagedPinnedArray(-1)
    with pytest.raises(ValueError):
        UnmanagedPinnedArray.from_address(0, 4)


def test_base_pinned_array_cannot_be_instantiated():
    with pytest.raises(TypeError):
        PinnedArray(4)
