import errno
import hashlib
import logging
import os
from pathlib import Path

import pytest

import forkwalk.adapters.local_fs as local_fs_mod
from forkwalk.adapters.local_fs import LocalFS
from forkwalk.adapters.md5_digest import MD5Digest
from forkwalk.domain.models import WalkConfig
from forkwalk.services import BenchmarkService

LEVELS = [1, 2, 4, os.cpu_count() or 1]


class RecordingFS(LocalFS):
    """Concrete FS adapter that records how each file's content was read."""

    def __init__(self):
        self.whole: list[str] = []
        self.streamed: list[str] = []

    def read_bytes(self, path):
        self.whole.append(Path(path).name)
        return super().read_bytes(path)

    def read_chunks(self, path, buffer):
        self.streamed.append(Path(path).name)
        return super().read_chunks(path, buffer)


def write_file(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


@pytest.mark.parametrize("hashing", [False, True])
def test_empty_root_counts_zero(tmp_path: Path, hashing: bool):
    svc = BenchmarkService(LocalFS(), MD5Digest())
    for level in LEVELS:
        assert svc.run_once(tmp_path, level, hashing).files == 0


def test_mixed_sizes_pick_read_strategy_by_size(tmp_path: Path):
    sizes = {"small.bin": 10, "large.bin": 2_000_000, "medium.bin": 500_000}
    contents = {}
    for name, size in sizes.items():
        contents[name] = os.urandom(size)
        write_file(tmp_path / name, contents[name])

    lines: list[str] = []
    fs = RecordingFS()
    svc = BenchmarkService(fs, MD5Digest(), WalkConfig(print_hex=True, echo=lines.append))

    result = svc.run_once(tmp_path, 2, hashing=True)

    assert result.files == 3
    assert sorted(fs.whole) == ["medium.bin", "small.bin"]
    assert fs.streamed == ["large.bin"]

    digests = {line.split(" ", 1)[1]: line.split(" ", 1)[0] for line in lines}
    assert len(digests) == 3
    for name, data in contents.items():
        hexdigest = digests[str(tmp_path / name)]
        assert hexdigest
        assert hexdigest == hashlib.md5(data).hexdigest()


@pytest.mark.parametrize(
    "exclusions",
    [
        (".git", "out/classes", "build/jdk"),
        ("build/jdk", "out/classes", ".git"),
    ],
)
def test_git_directory_is_skipped_whatever_the_order(tmp_path: Path, exclusions):
    for i in range(100):
        write_file(tmp_path / ".git" / f"obj{i}", b"o")
    write_file(tmp_path / "a.txt", b"a")
    write_file(tmp_path / "b.txt", b"b")

    svc = BenchmarkService(LocalFS(), MD5Digest(), WalkConfig(exclusions=exclusions))
    for level in LEVELS:
        assert svc.run_once(tmp_path, level, hashing=True).files == 2


def test_locked_file_is_counted_with_empty_digest(tmp_path: Path, monkeypatch, caplog):
    locked = tmp_path / "locked.txt"
    write_file(locked, b"do not read")
    write_file(tmp_path / "a.txt", b"a")
    write_file(tmp_path / "sub" / "b.txt", b"b")

    real_open = open

    def locking_open(file, *args, **kwargs):
        if Path(file) == locked:
            raise OSError(errno.EBUSY, "Device or resource busy", str(file))
        return real_open(file, *args, **kwargs)

    monkeypatch.setattr(local_fs_mod, "open", locking_open, raising=False)

    lines: list[str] = []
    svc = BenchmarkService(
        LocalFS(), MD5Digest(), WalkConfig(print_hex=True, echo=lines.append)
    )
    with caplog.at_level(logging.WARNING):
        result = svc.run_once(tmp_path, 2, hashing=True)

    assert result.files == 3
    assert f" {locked}" in lines  # empty hex before the path
    assert "locked.txt" in caplog.text
    others = [line for line in lines if not line.endswith("locked.txt")]
    assert len(others) == 2 and all(line.split(" ", 1)[0] for line in others)
