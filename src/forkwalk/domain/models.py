# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .errors import ConfigurationError

SMALL_FILE_THRESHOLD = 1_000_000

# Build and VCS output that is never worth walking.
DEFAULT_EXCLUSIONS: tuple[str, ...] = (
    ".git",
    "community/build",
    "build/jdk",
    "out/classes",
    "out/tests",
)


class TaskState(enum.Enum):
    CREATED = "created"
    RUNNING = "running"
    AWAITING_CHILDREN = "awaiting_children"
    JOINED = "joined"
    FAILED = "failed"


class ReadMode(enum.Enum):
    """How a file's content is fed into the digest."""

    WHOLE = "whole"
    STREAM = "stream"


@dataclass(frozen=True)
class WalkConfig:
    """
    Settings shared read-only by every task of one run.

    `echo` receives the optional diagnostic lines (digests, visited directories).
    """

    hashing: bool = True
    print_hex: bool = False
    print_dir: bool = False
    small_file_threshold: int = SMALL_FILE_THRESHOLD
    exclusions: tuple[str, ...] = DEFAULT_EXCLUSIONS
    echo: Callable[[str], None] = field(default=print, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.small_file_threshold <= 0:
            raise ConfigurationError(
                f"small_file_threshold must be positive, got {self.small_file_threshold}"
            )


@dataclass(frozen=True)
class FileRecord:
    path: Path
    size: int
    digest: Optional[bytes] = None

    @property
    def hexdigest(self) -> str:
        return (self.digest or b"").hex()


@dataclass(frozen=True)
class BenchmarkResult:
    hashing: bool
    parallelism: int
    files: int
    elapsed_ms: int

    def summary(self) -> str:
        return (
            f"Hashing: {str(self.hashing).lower()}, "
            f"parallelism: {self.parallelism:02d}, "
            f"files: {self.files}, "
            f"elapsed: {self.elapsed_ms} ms"
        )
