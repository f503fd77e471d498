# naming.py
from __future__ import annotations

import re

WORKFLOW_EXTENSION = ".yml"
SEPARATOR = "-"

_DERIVED = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*)?" + re.escape(WORKFLOW_EXTENSION) + r"$")
_SEPARATOR_RUN = re.compile(re.escape(SEPARATOR) + r"{2,}")


def _keep(ch: str) -> str:
    if ch.isascii() and ch.isalnum():
        return ch
    return SEPARATOR


def filename_for(name: str) -> str:
    """
    Derive a workflow's filename from its human readable name.

    Letters and digits are kept, everything else becomes a single `-`,
    and the result is lowercased with `.yml` appended:

        filename_for("My Service!! v2") == "my-service-v2.yml"

    A value that already is a derived filename comes back unchanged, so
    filename_for(filename_for(x)) == filename_for(x).
    """
    if _DERIVED.match(name):
        return name

    mapped = "".join(_keep(ch) for ch in name)
    mapped = mapped.strip(SEPARATOR)
    mapped = _SEPARATOR_RUN.sub(SEPARATOR, mapped)
    return (mapped + WORKFLOW_EXTENSION).lower()


def join(sep: str, *parts: str) -> str:
    """Join the non-empty parts with sep."""
    return sep.join(p for p in parts if p)
