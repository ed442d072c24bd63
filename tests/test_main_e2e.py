def test_pack_to_file_and_unpack(tmp_path, capsys, m):
    out = tmp_path / "values.bin"
    status = m.main([
        "pack", "--big", "-o", str(out),
        "u16:513", "f64:1.5", "i8:-3", "raw:abcd",
    ])
    assert status == 0
    assert out.read_bytes() == bytes.fromhex("0201" "3ff8000000000000" "fd" "abcd")
    capsys.readouterr()

    status = m.main([
        "unpack", "--big", "-i", str(out), "u16", "f64", "i8", "raw:2",
    ])
    assert status == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["u16 = 513", "f64 = 1.5", "i8 = -3", "raw = abcd"]


def test_pack_prints_hex(capsys, m):
    assert m.main(["pack", "-q", "i32:300"]) == 0
    assert capsys.readouterr().out == "2c010000\n"


def test_bad_input_reports_error(tmp_path, capsys, m):
    assert m.main(["pack", "x:1"]) == 1
    assert "[!]" in capsys.readouterr().out

    assert m.main(["unpack", "--hex", "0100", "u32"]) == 1
    assert "[!] Input too short" in capsys.readouterr().out

    assert m.main(["unpack", "-i", str(tmp_path / "nope.bin"), "u8"]) == 1
    assert "[!] Input file not found" in capsys.readouterr().out


def test_unpack_reports_unread_bytes(capsys, m):
    assert m.main(["unpack", "--hex", "ff00", "u8"]) == 0
    out = capsys.readouterr().out
    assert "u8 = 255" in out
    assert "Unread:  1.00 B" in out
