"""Node id generation and per-format id sanitization."""

from __future__ import annotations

import itertools
import re
import secrets
import string
import threading
import time
from typing import Optional, Union

from .formats import Format

_BASE36 = string.digits + string.ascii_lowercase
_SVG_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")


class IdGenerator:
    """Produces ids of the form ``node_<ms>_<counter>_<suffix>``.

    The counter is per instance, so independent conversions never share state.
    """

    def __init__(self, prefix: str = "node"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        millis = time.time_ns() // 1_000_000
        suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
        return f"{self.prefix}_{millis}_{next(self._counter)}_{suffix}"


_local = threading.local()


def generate_id() -> str:
    """Return a new opaque node id, unique for the life of the process."""
    gen = getattr(_local, "generator", None)
    if gen is None:
        gen = _local.generator = IdGenerator()
    return gen()


def sanitize_id(node_id: str, fmt: Union[Format, str]) -> str:
    """Rewrite ``node_id`` into a key the target format accepts.

    Presentation only: the tree's own ids are never touched.
    """
    fmt = Format.from_name(fmt)
    if fmt is Format.D2:
        return node_id.replace("-", "_")
    if fmt is Format.SVG:
        cleaned = _SVG_UNSAFE.sub("_", node_id)
        if not cleaned or not (cleaned[0].isalpha() or cleaned[0] == "_"):
            cleaned = f"n_{cleaned}"
        return cleaned
    return node_id


class IdSanitizer:
    """Sanitized-key table for one serialization pass.

    Keeps the mapping reversible: when two different ids collapse onto the
    same key, the later one gets a numeric suffix.
    """

    def __init__(self, fmt: Union[Format, str]):
        self.format = Format.from_name(fmt)
        self._forward: dict[str, str] = {}
        self._reverse: dict[str, str] = {}

    def sanitize(self, node_id: str) -> str:
        key = self._forward.get(node_id)
        if key is not None:
            return key
        base = sanitize_id(node_id, self.format)
        key = base
        n = 2
        while key in self._reverse:
            key = f"{base}_{n}"
            n += 1
        self._forward[node_id] = key
        self._reverse[key] = node_id
        return key

    def original(self, key: str) -> Optional[str]:
        """Map a sanitized key back to the id it was produced from."""
        return self._reverse.get(key)

    def __len__(self) -> int:
        return len(self._forward)
