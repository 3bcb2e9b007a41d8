from .errors import (
    ConfigurationError,
    FileLockedError,
    FilesystemError,
    ForkwalkError,
    TaskFailedError,
)
from .models import (
    DEFAULT_EXCLUSIONS,
    SMALL_FILE_THRESHOLD,
    BenchmarkResult,
    FileRecord,
    ReadMode,
    TaskState,
    WalkConfig,
)

__all__ = [
    "BenchmarkResult",
    "ConfigurationError",
    "DEFAULT_EXCLUSIONS",
    "FileLockedError",
    "FileRecord",
    "FilesystemError",
    "ForkwalkError",
    "ReadMode",
    "SMALL_FILE_THRESHOLD",
    "TaskFailedError",
    "TaskState",
    "WalkConfig",
]
