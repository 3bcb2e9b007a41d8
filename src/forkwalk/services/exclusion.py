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

from pathlib import Path, PurePath
from typing import Iterable, Union


class ExclusionFilter:
    """
    Decides whether a directory subtree is skipped entirely.

    A pattern matches when its components equal the trailing components of the
    directory path, so "build" matches "/src/build" but not "/src/mybuild", and
    "out/classes" matches "/x/out/classes" only.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._suffixes = tuple(
            PurePath(p).parts for p in patterns if p and PurePath(p).parts
        )

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(str(PurePath(*parts)) for parts in self._suffixes)

    def should_skip(self, directory: Union[str, Path]) -> bool:
        parts = PurePath(directory).parts
        for suffix in self._suffixes:
            if len(suffix) <= len(parts) and parts[-len(suffix) :] == suffix:
                return True
        return False
