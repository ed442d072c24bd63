import pytest

import membuffer
from membuffer import MemoryBuffer, MAX_BUFFER_SIZE


def _is_power_of_two(n):
    return n > 0 and n & (n - 1) == 0


def test_default_construction():
    buf = MemoryBuffer()
    assert buf.capacity == 4
    assert buf.position == 0
    assert len(buf) == 0


@pytest.mark.parametrize(
    "size, capacity", [(0, 4), (1, 4), (4, 4), (5, 8), (100, 128), (1024, 1024)]
)
def test_initial_capacity_is_rounded_up(size, capacity):
    assert MemoryBuffer(size).capacity == capacity


def test_invalid_initial_size_raises():
    with pytest.raises(ValueError):
        MemoryBuffer(-1)
    with pytest.raises(ValueError):
        MemoryBuffer(MAX_BUFFER_SIZE + 1)


def test_appends_keep_growth_invariant():
    buf = MemoryBuffer()
    for i in range(300):
        buf.append(i & 0xFF)
        assert _is_power_of_two(buf.capacity)
        assert buf.capacity >= buf.position == i + 1
    assert list(buf) == [i & 0xFF for i in range(300)]
    assert buf.capacity == 512


def test_growth_doubles_and_copies_written_bytes():
    buf = MemoryBuffer()
    buf.extend(b"\x01\x02\x03\x04")
    old = buf.array
    buf.ensure_capacity_and_advance(13)
    assert buf.capacity == 32
    assert buf.position == 17
    assert buf.array is not old
    assert bytes(buf.array[:4]) == b"\x01\x02\x03\x04"


def test_ensure_capacity_rejects_negative_and_ceiling():
    buf = MemoryBuffer()
    buf.extend(b"ab")
    with pytest.raises(ValueError):
        buf.ensure_capacity_and_advance(-1)
    with pytest.raises(ValueError):
        buf.ensure_capacity_and_advance(MAX_BUFFER_SIZE - 1)
    assert buf.position == 2
    assert buf.capacity == 4
    assert buf.to_bytes() == b"ab"


def test_ceiling_is_checked_against_position(monkeypatch):
    monkeypatch.setattr(membuffer, "MAX_BUFFER_SIZE", 16)
    buf = MemoryBuffer()
    buf.ensure_capacity_and_advance(16)
    assert buf.capacity == 16
    with pytest.raises(ValueError):
        buf.append(0)
    assert buf.position == 16


def test_allocate_space_alias():
    buf = MemoryBuffer()
    buf.allocate_space(5)
    assert buf.position == 5 and buf.capacity == 8


def test_set_position_does_not_clear():
    buf = MemoryBuffer()
    buf.extend(b"\x09\x08\x07")
    buf.set_position(1)
    assert len(buf) == 1
    buf.set_position(3)
    assert buf.to_bytes() == b"\x09\x08\x07"
    buf.set_position(4)
    with pytest.raises(IndexError):
        buf.set_position(5)
    with pytest.raises(IndexError):
        buf.set_position(-1)
    assert buf.position == 4


def test_indexing_is_bounded_by_position():
    buf = MemoryBuffer()
    buf.extend(b"\x10\x20")
    assert buf[0] == 0x10 and buf[1] == 0x20
    buf[1] = 0x21
    assert buf[1] == 0x21
    with pytest.raises(IndexError):
        _ = buf[2]
    with pytest.raises(IndexError):
        _ = buf[-1]
    with pytest.raises(IndexError):
        buf[2] = 1


def test_insert_and_remove_shift_bytes():
    buf = MemoryBuffer()
    buf.extend(b"acd")
    buf.insert(1, ord("b"))
    assert buf.to_bytes() == b"abcd"
    buf.insert(4, ord("e"))
    assert buf.to_bytes() == b"abcde"
    assert buf.capacity == 8
    with pytest.raises(IndexError):
        buf.insert(7, 0)

    del buf[0]
    assert buf.to_bytes() == b"bcde"
    buf.remove_at(3)
    assert buf.to_bytes() == b"bcd"
    with pytest.raises(IndexError):
        buf.remove_at(3)


def test_search_remove_and_clear():
    buf = MemoryBuffer()
    buf.extend(b"xyzy")
    assert buf.index(ord("y")) == 1
    assert ord("z") in buf
    assert 0 not in buf
    assert 256 not in buf
    buf.remove(ord("y"))
    assert buf.to_bytes() == b"xzy"
    with pytest.raises(ValueError):
        buf.remove(ord("q"))
    assert buf.pop() == ord("y")

    capacity = buf.capacity
    buf.clear()
    assert len(buf) == 0 and buf.capacity == capacity


def test_search_ignores_bytes_past_position():
    buf = MemoryBuffer()
    buf.extend(b"ab")
    buf.set_position(1)
    assert ord("b") not in buf
    with pytest.raises(ValueError):
        buf.index(ord("b"))


def test_append_rejects_non_byte():
    buf = MemoryBuffer()
    with pytest.raises(ValueError):
        buf.append(256)
    assert buf.position == 0


def test_copy_to():
    buf = MemoryBuffer()
    buf.extend(b"abc")
    target = bytearray(5)
    buf.copy_to(target, 2)
    assert target == bytearray(b"\x00\x00abc")
    with pytest.raises(ValueError):
        buf.copy_to(bytearray(4), 2)
    with pytest.raises(IndexError):
        buf.copy_to(bytearray(4), 5)


def test_getbuffer_covers_written_region():
    buf = MemoryBuffer()
    buf.extend(b"hello")
    view = buf.getbuffer()
    assert view.tobytes() == b"hello"
    view.release()


def test_slices_cover_written_region_only():
    buf = MemoryBuffer()
    buf.extend(b"abcde")
    assert buf[1:3] == b"bc"
    assert buf[::-1] == b"edcba"
    assert buf[3:] == b"de"
    buf.set_position(2)
    assert buf[:] == b"ab"
    assert buf[0:10] == b"ab"


def test_slice_assignment_and_deletion_rejected():
    buf = MemoryBuffer()
    buf.extend(b"abc")
    with pytest.raises(TypeError):
        buf[0:1] = b"z"
    with pytest.raises(TypeError):
        del buf[0:1]
    assert buf.to_bytes() == b"abc"
