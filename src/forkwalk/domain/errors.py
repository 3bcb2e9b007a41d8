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

from pathlib import Path
from typing import Union


class ForkwalkError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(ForkwalkError):
    """Bad CLI args or unusable config (e.g., parallelism below 1)."""


class FilesystemError(ForkwalkError):
    """Unreadable paths, permission issues, locked files, etc."""


class FileLockedError(FilesystemError):
    """The OS reported a file as locked or otherwise inaccessible for reading."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(f"File is locked or inaccessible: {path}")
        self.path = Path(path)


class TaskFailedError(ForkwalkError):
    """A walk task was abandoned; its subtree contributes nothing."""

    def __init__(self, directory: Union[str, Path]) -> None:
        super().__init__(f"Walk of {directory} was abandoned")
        self.directory = Path(directory)
