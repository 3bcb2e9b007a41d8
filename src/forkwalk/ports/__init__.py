from .digest import DigestAccumulator, DigestPort
from .filesystem import DirEntryLike, FilesystemPort

__all__ = ["DigestAccumulator", "DigestPort", "DirEntryLike", "FilesystemPort"]
