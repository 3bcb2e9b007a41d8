# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import errno
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..domain.errors import FileLockedError
from ..ports.filesystem import DirEntryLike, FilesystemPort

# errno values meaning "someone else holds this file" or "you may not read it".
LOCKED_ERRNOS = frozenset(
    code
    for code in (
        getattr(errno, name, None)
        for name in (
            "EACCES",
            "EPERM",
            "EBUSY",
            "EAGAIN",
            "EWOULDBLOCK",
            "EDEADLK",
            "ETXTBSY",
        )
    )
    if code is not None
)

# ERROR_ACCESS_DENIED, ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
LOCKED_WINERRORS = frozenset({5, 32, 33})


def is_locked_error(exc: OSError) -> bool:
    """Classify an OSError as a locked/inaccessible file by its error codes."""
    winerror = getattr(exc, "winerror", None)
    if winerror is not None:
        return winerror in LOCKED_WINERRORS
    return exc.errno in LOCKED_ERRNOS


@contextmanager
def _locked_as_domain_error(path: Path) -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        if is_locked_error(exc):
            raise FileLockedError(path) from exc
        raise


class LocalFS(FilesystemPort):
    """Local filesystem adapter built on os.scandir and plain binary reads."""

    def list_dir(self, path: Path) -> list[DirEntryLike]:
        # Materialised so the handle is closed before any child work starts.
        with os.scandir(path) as it:
            return list(it)

    def identity(self, path: Path) -> tuple[int, int]:
        st = os.stat(path)
        return st.st_dev, st.st_ino

    def stat(self, path: Path) -> dict:
        st = os.lstat(path)
        return {
            "path": str(path),
            "size": st.st_size,
            "mtime_ns": getattr(st, "st_mtime_ns", int(st.st_mtime * 1e9)),
        }

    def read_bytes(self, path: Path) -> bytes:
        with _locked_as_domain_error(path):
            with open(path, "rb") as f:
                return f.read()

    def read_chunks(self, path: Path, buffer: bytearray) -> Iterator[memoryview]:
        view = memoryview(buffer)
        with _locked_as_domain_error(path):
            with open(path, "rb") as f:
                while True:
                    n = f.readinto(buffer)
                    if not n:
                        break
                    yield view[:n]
