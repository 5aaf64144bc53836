import io

import pytest

from gcovfmt.vfile import VirtualFile


def test_write_and_getvalue():
    vf = VirtualFile(size=64)
    data = b"gcda\x00\x01"
    assert vf.write(data) == len(data)
    assert vf.getvalue() == data
    assert vf.tell() == len(data)


def test_successive_writes_concatenate():
    vf = VirtualFile(size=2)
    vf.write(b"abc")
    vf.write(b"defgh")
    assert vf.getvalue() == b"abcdefgh"
    assert vf.count == 8


def test_capacity_doubles():
    vf = VirtualFile(size=4)
    vf.write(b"0123456789")
    assert vf.size == 16
    assert vf.size >= vf.count


def test_capacity_unchanged_when_fits():
    vf = VirtualFile(size=8)
    vf.write(b"1234")
    assert vf.size == 8


def test_rewind_fresh_file():
    vf = VirtualFile()
    assert vf.seek(0, 0) == 0
    vf.write(b"x")
    assert vf.getvalue() == b"x"


def test_seek_after_write_refused():
    vf = VirtualFile()
    vf.write(b"x")
    with pytest.raises(io.UnsupportedOperation):
        vf.seek(0, 0)


def test_seek_nonzero_refused():
    vf = VirtualFile()
    with pytest.raises(io.UnsupportedOperation):
        vf.seek(4, 0)


def test_invalid_initial_size():
    with pytest.raises(ValueError):
        VirtualFile(size=0)


def test_close_keeps_contents_and_blocks_writes():
    with VirtualFile(filename="a.gcda") as vf:
        vf.write(b"data")
    assert vf.closed is True
    assert vf.getvalue() == b"data"
    with pytest.raises(ValueError):
        vf.write(b"more")