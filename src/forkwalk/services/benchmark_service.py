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

import dataclasses
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..domain.errors import ConfigurationError, TaskFailedError
from ..domain.models import BenchmarkResult, WalkConfig
from ..ports.digest import DigestPort
from ..ports.filesystem import FilesystemPort
from .exclusion import ExclusionFilter
from .walk_task import WalkContext, WalkTask

logger = logging.getLogger(__name__)


def default_levels() -> list[int]:
    """1, 2, 4 and the machine's core count, deduplicated and sorted."""
    return sorted({1, 2, 4, os.cpu_count() or 1})


class BenchmarkService:
    """
    Runs the parallel walk under worker pools of different sizes and times it.

    Each run builds a fresh pool; a run always goes to completion (no timeout,
    no cancellation). Identical input yields identical counts at every level.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        digest: DigestPort,
        config: Optional[WalkConfig] = None,
    ) -> None:
        self._fs = fs
        self._digest = digest
        self._config = config or WalkConfig()
        self._exclusion = ExclusionFilter(self._config.exclusions)

    @property
    def config(self) -> WalkConfig:
        return self._config

    def run_once(self, root: Path, parallelism: int, hashing: bool) -> BenchmarkResult:
        """
        Walk `root` once with `parallelism` workers.

        Returns:
            The timing and total file count of the run. A root whose walk was
            abandoned reports zero files.
        """
        if parallelism < 1:
            raise ConfigurationError(f"parallelism must be at least 1, got {parallelism}")

        root = Path(root)
        config = dataclasses.replace(self._config, hashing=hashing)
        logger.debug(
            "BenchmarkService.run_once: root=%s parallelism=%d hashing=%s",
            root,
            parallelism,
            hashing,
        )

        start = time.perf_counter()
        files = self._walk(root, config, parallelism)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        return BenchmarkResult(
            hashing=hashing, parallelism=parallelism, files=files, elapsed_ms=elapsed_ms
        )

    def sweep(
        self,
        root: Path,
        levels: Optional[Iterable[int]] = None,
        hashing_modes: Iterable[bool] = (False, True),
    ) -> Iterator[BenchmarkResult]:
        """Run every (hashing, parallelism) combination, hashing mode outermost."""
        levels = list(levels) if levels else default_levels()
        for hashing in hashing_modes:
            for parallelism in levels:
                yield self.run_once(root, parallelism, hashing)

    def _walk(self, root: Path, config: WalkConfig, parallelism: int) -> int:
        if self._exclusion.should_skip(root):
            logger.info("BenchmarkService: root %s is excluded", root)
            return 0

        with ThreadPoolExecutor(
            max_workers=parallelism, thread_name_prefix="forkwalk"
        ) as executor:
            context = WalkContext(
                config=config,
                fs=self._fs,
                digest=self._digest,
                exclusion=self._exclusion,
                executor=executor,
            )
            task = WalkTask.for_root(root, context)
            try:
                return executor.submit(task.invoke).result()
            except TaskFailedError as e:
                logger.error("BenchmarkService: walk of %s failed: %s", root, e)
                return 0
