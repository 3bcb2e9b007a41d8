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

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Protocol


class DirEntryLike(Protocol):
    """The subset of `os.DirEntry` the walk relies on."""

    name: str
    path: str

    def is_dir(self) -> bool: ...

    def is_file(self) -> bool: ...

    def is_symlink(self) -> bool: ...


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def list_dir(self, path: Path) -> list[DirEntryLike]:
        """Return the immediate entries of a directory, in filesystem order."""
        raise NotImplementedError

    @abstractmethod
    def identity(self, path: Path) -> tuple[int, int]:
        """Return (device, inode) for a path, following symlinks."""
        raise NotImplementedError

    @abstractmethod
    def stat(self, path: Path) -> dict:
        """Return metadata (size, mtime_ns) for a given path without following symlinks."""
        raise NotImplementedError

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """
        Read a whole file in one call.

        Raises FileLockedError when the OS reports the file locked or inaccessible.
        """
        raise NotImplementedError

    @abstractmethod
    def read_chunks(self, path: Path, buffer: bytearray) -> Iterator[memoryview]:
        """
        Fill `buffer` from the file repeatedly, yielding a view of each filled part.

        Views are only valid until the next chunk is requested.
        Raises FileLockedError when the OS reports the file locked or inaccessible.
        """
        raise NotImplementedError
