from .benchmark_service import BenchmarkService, default_levels
from .digest_service import DigestStrategy
from .exclusion import ExclusionFilter
from .walk_task import WalkContext, WalkTask


__all__ = [
    'BenchmarkService',
    'DigestStrategy',
    'ExclusionFilter',
    'WalkContext',
    'WalkTask',
    'default_levels',
]
