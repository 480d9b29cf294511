from __future__ import annotations

import re
from uuid import uuid4

_PREFIX_RE = re.compile(r"^[a-z][a-z0-9]{1,24}$")


def new_prefixed_id(prefix: str) -> str:
    """Opaque unique id of the form `{prefix}_{uuidhex}`."""
    if not _PREFIX_RE.fullmatch(prefix):
        raise ValueError(f"Invalid id prefix {prefix!r}: expected 2-25 lowercase letters/digits")
    return f"{prefix}_{uuid4().hex}"


def is_prefixed_id(value: str, prefix: str) -> bool:
    return value.startswith(f"{prefix}_")
