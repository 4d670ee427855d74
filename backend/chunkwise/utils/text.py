"""Text processing helpers."""

from __future__ import annotations

import re

_UNSAFE_ID_RE = re.compile(r"[^A-Za-z0-9]")


def sanitize_filename(name: str) -> str:
    """Replace anything outside ASCII letters and digits with underscores.

    Vector ids are built from the sanitized name, and the vector store only
    accepts a restricted ASCII charset.
    """
    return _UNSAFE_ID_RE.sub("_", name)
