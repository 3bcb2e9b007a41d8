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

import logging
from pathlib import Path
from typing import Optional

from ..domain.errors import ConfigurationError, FileLockedError
from ..domain.models import SMALL_FILE_THRESHOLD, ReadMode
from ..ports.digest import DigestPort
from ..ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)


class DigestStrategy:
    """
    Size-adaptive file digest.

      - files below `threshold` bytes are read in one call and digested at once
      - larger files are streamed through a reusable `threshold`-sized buffer,
        so peak memory stays bounded whatever the file size

    Not thread-safe: the chunk buffer is reused between files, so each walk task
    owns its own instance.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        digest: DigestPort,
        threshold: int = SMALL_FILE_THRESHOLD,
    ) -> None:
        if threshold <= 0:
            raise ConfigurationError(f"threshold must be positive, got {threshold}")
        self._fs = fs
        self._digest = digest
        self._threshold = int(threshold)
        self._buffer: Optional[bytearray] = None

    @property
    def algorithm(self) -> str:
        return self._digest.name

    def mode_for(self, size: int) -> ReadMode:
        return ReadMode.WHOLE if size < self._threshold else ReadMode.STREAM

    def digest(self, path: Path, size: int) -> bytes:
        """
        Return the content digest of `path`.

        A locked or inaccessible file is logged and yields b"" so the walk can
        continue. Any other OSError propagates to the caller.
        """
        try:
            if self.mode_for(size) is ReadMode.WHOLE:
                return self._digest_whole(path)
            return self._digest_stream(path)
        except FileLockedError as e:
            logger.warning("DigestStrategy.digest: skipping content of %s: %s", path, e)
            return b""

    def _digest_whole(self, path: Path) -> bytes:
        h = self._digest.new()
        h.update(self._fs.read_bytes(path))
        return h.digest()

    def _digest_stream(self, path: Path) -> bytes:
        if self._buffer is None:
            self._buffer = bytearray(self._threshold)
        h = self._digest.new()
        for chunk in self._fs.read_chunks(path, self._buffer):
            h.update(chunk)
        return h.digest()
