import os
import stat

import pytest

from kindcli.command import RunError
from kindcli.images import (
    check_if_image_retag_required,
    image_id,
    remove_duplicates,
    sanitize_image,
    save,
)

IMAGE_ID = "sha256:fd3fd9ab134a864eeb7b2c073c0d90192546f597c60416b81fc4166cca47f29a"


@pytest.mark.parametrize(
    ("items", "want"),
    [
        ([], []),
        (["one", "two"], ["one", "two"]),
        (["one", "two", "two"], ["one", "two"]),
        (["one", "two", "two", "one"], ["one", "two"]),
    ],
)
def test_remove_duplicates(items, want):
    got = remove_duplicates(items)
    assert sorted(got) == sorted(want)
    assert got == want


@pytest.mark.parametrize(
    ("image", "sanitized"),
    [
        ("ubuntu:18.04", "docker.io/library/ubuntu:18.04"),
        ("custom/ubuntu:18.04", "docker.io/custom/ubuntu:18.04"),
        ("registry.k8s.io/kindest/node:latest", "registry.k8s.io/kindest/node:latest"),
        ("registry.k8s.io/pause:3.6", "registry.k8s.io/pause:3.6"),
        ("baz", "docker.io/library/baz:latest"),
        ("other-registry/baz", "docker.io/other-registry/baz:latest"),
    ],
)
def test_sanitize_image(image, sanitized):
    assert sanitize_image(image) == sanitized


def _fetcher(tags=None, error=None):
    def fetch(node, image):
        if error is not None:
            raise error
        return tags

    return fetch


@pytest.mark.parametrize(
    ("tags", "error", "image_name", "expected"),
    [
        (
            {"docker.io/library/image1:tag1": True, "k8s.io/image1:tag1": True},
            None,
            "k8s.io/image1:tag1",
            (True, False, "k8s.io/image1:tag1"),
        ),
        (
            {"docker.io/library/image1:tag1": True, "k8s.io/image1:tag1": True},
            None,
            "k8s.io/image1:tag2",
            (True, True, "k8s.io/image1:tag2"),
        ),
        (
            {"docker.io/foo/image1:tag1": True},
            None,
            "foo/image1:tag2",
            (True, True, "docker.io/foo/image1:tag2"),
        ),
        (
            {},
            RuntimeError("some runtime error"),
            "k8s.io/image1:tag2",
            (False, False, ""),
        ),
    ],
)
def test_check_if_image_retag_required(tags, error, image_name, expected):
    result = check_if_image_retag_required(
        None, IMAGE_ID, image_name, _fetcher(tags, error)
    )
    assert result == expected


def test_check_if_image_retag_required_empty_tags():
    assert check_if_image_retag_required(None, IMAGE_ID, "foo", _fetcher({})) == (
        False,
        False,
        "",
    )


@pytest.fixture
def fake_docker(tmp_path, monkeypatch):
    """Install a stand-in ``docker`` on PATH; returns (set_body, args_file)."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    args_file = tmp_path / "args.txt"
    script = bin_dir / "docker"

    def set_body(body):
        script.write_text(
            "#!/bin/sh\n" f'echo "$@" > "{args_file}"\n' + body + "\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return set_body, args_file


def test_image_id_returns_single_line(fake_docker):
    set_body, args_file = fake_docker
    set_body("echo sha256:abc")
    assert image_id("myimage") == "sha256:abc"
    assert args_file.read_text().strip() == "image inspect -f {{ .Id }} myimage"


def test_image_id_rejects_multiple_lines(fake_docker):
    set_body, _ = fake_docker
    set_body("echo one\necho two")
    with pytest.raises(RuntimeError, match="got 2 lines"):
        image_id("myimage")


def test_image_id_missing_image_raises_run_error(fake_docker):
    set_body, _ = fake_docker
    set_body("exit 1")
    with pytest.raises(RunError):
        image_id("missing")


def test_save_passes_images_and_destination(fake_docker, tmp_path):
    set_body, args_file = fake_docker
    set_body("exit 0")
    dest = str(tmp_path / "images.tar")
    save(["a:1", "b:2"], dest)
    assert args_file.read_text().strip() == f"save -o {dest} a:1 b:2"


def test_save_failure_raises_run_error(fake_docker, tmp_path):
    set_body, _ = fake_docker
    set_body("echo boom >&2\nexit 3")
    with pytest.raises(RunError) as info:
        save(["a:1"], str(tmp_path / "out.tar"))
    assert b"boom" in info.value.output