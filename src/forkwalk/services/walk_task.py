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

import logging
import threading
from concurrent.futures import Executor
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from ..domain.errors import TaskFailedError
from ..domain.models import FileRecord, TaskState, WalkConfig
from ..ports.digest import DigestPort
from ..ports.filesystem import DirEntryLike, FilesystemPort
from .digest_service import DigestStrategy
from .exclusion import ExclusionFilter

logger = logging.getLogger(__name__)

Identity = Tuple[int, int]


@dataclass(frozen=True)
class WalkContext:
    """Everything a task needs besides its own directory; shared by reference."""

    config: WalkConfig
    fs: FilesystemPort
    digest: DigestPort
    exclusion: ExclusionFilter
    executor: Executor


class WalkTask:
    """
    Traversal of one directory, forking one child task per subdirectory.

    Lifecycle: CREATED -> RUNNING -> AWAITING_CHILDREN -> JOINED, or FAILED when
    the subtree is abandoned. Files are processed on the running thread; child
    directories are submitted to the shared executor and joined afterwards, their
    counts folded into this task's own.

    Whichever thread first claims a task runs it. A parent joining a child that
    no worker has picked up yet runs it inline (from a loop, not by recursion),
    so a bounded pool never ends up with every worker blocked on queued work.

    `ancestry` holds the (device, inode) of every directory from the root down to
    this one; a subdirectory already in it is a symlink cycle and is not followed.
    """

    def __init__(
        self,
        directory: Path,
        context: WalkContext,
        ancestry: FrozenSet[Identity] = frozenset(),
    ) -> None:
        self.directory = Path(directory)
        self._ctx = context
        self._ancestry = ancestry
        self._count = 0
        self._children: list[WalkTask] = []
        self._next_child = 0
        self._digester: Optional[DigestStrategy] = None
        self._state = TaskState.CREATED
        self._claim_lock = threading.Lock()
        self._done = threading.Event()
        self._error: Optional[BaseException] = None

    @classmethod
    def for_root(cls, root: Path, context: WalkContext) -> "WalkTask":
        return cls(root, context, frozenset({context.fs.identity(root)}))

    def __repr__(self) -> str:
        return f"WalkTask({str(self.directory)!r}, state={self._state.value})"

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def children(self) -> tuple["WalkTask", ...]:
        return tuple(self._children)

    @property
    def count(self) -> int:
        """Files in this subtree; only meaningful once joined."""
        if self._state is not TaskState.JOINED:
            raise RuntimeError(f"{self!r} has not joined")
        return self._count

    # ------------------------------
    # Scheduling
    # ------------------------------

    def fork(self) -> "WalkTask":
        """Schedule this task on the executor and return immediately."""
        self._ctx.executor.submit(self._run_if_unclaimed)
        return self

    def invoke(self) -> int:
        """Run this task on the calling thread and return its joined count."""
        self._run_if_unclaimed()
        return self.join()

    def join(self) -> int:
        """
        Wait for this task and return its subtree count.

        Raises:
            TaskFailedError: the subtree was abandoned after a fatal error.
        """
        self._run_if_unclaimed()
        self._done.wait()
        if self._state is TaskState.FAILED:
            raise TaskFailedError(self.directory) from self._error
        return self._count

    def _claim(self) -> bool:
        with self._claim_lock:
            if self._state is not TaskState.CREATED:
                return False
            self._state = TaskState.RUNNING
            return True

    def _run_if_unclaimed(self) -> None:
        if self._claim():
            self._drive()

    def _drive(self) -> None:
        """
        Run this claimed task plus every unclaimed descendant it ends up joining.

        Inline children go on an explicit stack rather than nested calls, so the
        depth of the tree never reaches the interpreter's recursion limit.
        """
        self._start()
        stack = [self]
        try:
            while stack:
                task = stack[-1]
                if task._next_child >= len(task._children):
                    task._finish()
                    stack.pop()
                    continue
                child = task._children[task._next_child]
                if child._claim():
                    child._start()
                    stack.append(child)
                    continue
                child._done.wait()
                task._fold(child)
        except BaseException as e:
            for task in stack:
                task._abandon(e)
            raise

    def _start(self) -> None:
        try:
            self._scan()
        except Exception as e:
            # Children already forked are still drained before the task fails.
            self._error = e
        self._state = TaskState.AWAITING_CHILDREN

    def _fold(self, child: "WalkTask") -> None:
        self._next_child += 1
        if child._state is TaskState.FAILED:
            logger.warning("WalkTask: %s contributes no files", child.directory)
            return
        self._count += child._count

    def _finish(self) -> None:
        if self._error is not None:
            self._state = TaskState.FAILED
            logger.error(
                "WalkTask: abandoning subtree %s", self.directory, exc_info=self._error
            )
        else:
            self._state = TaskState.JOINED
        self._done.set()

    def _abandon(self, error: BaseException) -> None:
        if self._error is None:
            self._error = error
        self._state = TaskState.FAILED
        self._done.set()

    # ------------------------------
    # Work
    # ------------------------------

    def _scan(self) -> None:
        config = self._ctx.config
        if config.print_dir:
            config.echo(str(self.directory))

        try:
            entries = self._ctx.fs.list_dir(self.directory)
        except OSError as e:
            logger.warning("WalkTask: cannot list %s: %s", self.directory, e)
            return

        for entry in entries:
            self._visit(entry)

    def _visit(self, entry: DirEntryLike) -> None:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir()
        except OSError as e:
            # Looping links or links into unsearchable directories.
            if entry.is_symlink():
                logger.debug("WalkTask: unresolvable symlink %s: %s", path, e)
            else:
                logger.warning("WalkTask: cannot inspect %s: %s", path, e)
            return

        if is_dir:
            self._spawn(path)
        elif entry.is_symlink():
            # File links (and dangling ones) are seen but never counted or read.
            return
        else:
            self._visit_file(path, regular=entry.is_file())

    def _spawn(self, path: Path) -> None:
        if self._ctx.exclusion.should_skip(path):
            logger.debug("WalkTask: excluded %s", path)
            return

        try:
            ident = self._ctx.fs.identity(path)
        except OSError as e:
            logger.warning("WalkTask: cannot stat directory %s: %s", path, e)
            return

        if ident in self._ancestry:
            logger.warning("WalkTask: symlink cycle at %s; not following", path)
            return

        child = WalkTask(path, self._ctx, self._ancestry | {ident})
        self._children.append(child.fork())

    def _visit_file(self, path: Path, *, regular: bool) -> None:
        self._count += 1
        config = self._ctx.config

        # FIFOs, sockets and devices are counted but their content is never read.
        if not (config.hashing and regular):
            # The metadata read stands in for the content read.
            self._ctx.fs.stat(path)
            return

        size = int(self._ctx.fs.stat(path)["size"])
        record = FileRecord(path=path, size=size, digest=self._strategy().digest(path, size))
        if config.print_hex:
            config.echo(f"{record.hexdigest} {record.path}")

    def _strategy(self) -> DigestStrategy:
        if self._digester is None:
            self._digester = DigestStrategy(
                self._ctx.fs, self._ctx.digest, self._ctx.config.small_file_threshold
            )
        return self._digester
