import os
import stat

import pytest

from kindcli.fs import copy, copy_file, is_abs, temp_dir


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


def test_temp_dir_creates_directory_with_prefix(tmp_path):
    name = temp_dir(str(tmp_path), "images-tar")
    assert os.path.isdir(name)
    assert os.path.basename(name).startswith("images-tar")
    assert os.path.realpath(os.path.dirname(name)) == os.path.realpath(tmp_path)


def test_temp_dir_default_location():
    name = temp_dir("", "")
    try:
        assert os.path.isdir(name)
        assert is_abs(name)
    finally:
        os.rmdir(name)


@pytest.mark.parametrize(
    "path, expected",
    [("/usr/bin", True), ("relative/path", False), ("./here", False), ("/", True)],
)
def test_is_abs(path, expected):
    assert is_abs(path) is expected


def test_copy_file_keeps_content_and_mode(tmp_path):
    src = tmp_path / "src.txt"
    src.write_bytes(b"payload")
    os.chmod(src, 0o640)
    dst = tmp_path / "dst.txt"
    copy_file(str(src), str(dst))
    assert dst.read_bytes() == src.read_bytes()
    assert _mode(dst) == _mode(src)


def test_copy_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file(str(tmp_path / "absent"), str(tmp_path / "dst"))


def test_copy_creates_parent_directories(tmp_path):
    src = tmp_path / "one.txt"
    src.write_text("content")
    dst = tmp_path / "a" / "b" / "one.txt"
    copy(str(src), str(dst))
    assert dst.read_text() == "content"


def test_copy_directory_tree(tmp_path):
    src = tmp_path / "tree"
    (src / "nested").mkdir(parents=True)
    (src / "top.txt").write_text("top")
    (src / "nested" / "deep.txt").write_text("deep")
    os.chmod(src / "top.txt", 0o600)
    dst = tmp_path / "out" / "tree"
    copy(str(src), str(dst))
    assert (dst / "top.txt").read_text() == "top"
    assert (dst / "nested" / "deep.txt").read_text() == "deep"
    assert _mode(dst / "top.txt") == _mode(src / "top.txt")
    assert sorted(os.listdir(dst)) == sorted(os.listdir(src))


def test_copy_dereferences_symlinks(tmp_path):
    target = tmp_path / "real.txt"
    target.write_text("real data")
    src = tmp_path / "dir"
    src.mkdir()
    os.symlink(target, src / "link.txt")
    dst = tmp_path / "copy"
    copy(str(src), str(dst))
    copied = dst / "link.txt"
    assert not os.path.islink(copied)
    assert copied.read_text() == "real data"


def test_copy_broken_symlink_fails(tmp_path):
    link = tmp_path / "dangling"
    os.symlink(tmp_path / "missing", link)
    with pytest.raises(OSError):
        copy(str(link), str(tmp_path / "dst"))


def test_copy_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy(str(tmp_path / "nope"), str(tmp_path / "dst"))