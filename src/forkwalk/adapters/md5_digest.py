# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import hashlib

from ..ports.digest import DigestAccumulator, DigestPort


class MD5Digest(DigestPort):
    """
    MD5 content fingerprint. Used for throughput measurement, not security.
    """

    def __init__(self) -> None:
        # Copying an empty prototype is cheaper than a fresh constructor lookup.
        self._prototype = hashlib.md5(usedforsecurity=False)

    @property
    def name(self) -> str:
        return "md5"

    def new(self) -> DigestAccumulator:
        return self._prototype.copy()
