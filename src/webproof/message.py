"""Canonical message construction for web proofs.

The signed bytes are the first three wire fields joined by the record
delimiter:

    <session-marker-b64>|<timestamp>|<escaped-content>

Generation and verification both go through build_canonical_message, so any
change here is a breaking protocol change.
"""
from __future__ import annotations

import base64
import re

DELIMITER = "|"

# Characters that would break the single-line, fixed-field record
_ESCAPES = {
    "%": "%25",
    "|": "%7C",
    "\r": "%0D",
    "\n": "%0A",
}
_UNESCAPES = {v: k for k, v in _ESCAPES.items()}
_ESCAPE_RE = re.compile(r"%(..)?", re.DOTALL)
_TIMESTAMP_RE = re.compile(r"0|[1-9][0-9]*")


def escape_content(content: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in content)


def unescape_content(field: str) -> str:
    """Inverse of escape_content. Only the four canonical escapes are accepted."""
    def _sub(m: re.Match) -> str:
        seq = m.group(0)
        if seq not in _UNESCAPES:
            raise ValueError(f"invalid escape sequence {seq!r}")
        return _UNESCAPES[seq]
    if "|" in field or "\r" in field or "\n" in field:
        raise ValueError("unescaped delimiter in content field")
    return _ESCAPE_RE.sub(_sub, field)


def format_timestamp(timestamp: int) -> str:
    if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0:
        raise ValueError("timestamp must be a non-negative integer")
    return str(timestamp)


def parse_timestamp(field: str) -> int:
    if not _TIMESTAMP_RE.fullmatch(field):
        raise ValueError(f"non-canonical timestamp {field!r}")
    return int(field)


def encode_marker(marker: bytes) -> str:
    return base64.b64encode(marker).decode("ascii")


def canonical_fields(marker: bytes, timestamp: int, content: str) -> list[str]:
    return [encode_marker(marker), format_timestamp(timestamp), escape_content(content)]


def build_canonical_message(marker: bytes, timestamp: int, content: str) -> bytes:
    """Return the exact bytes that get signed for (marker, timestamp, content)."""
    return DELIMITER.join(canonical_fields(marker, timestamp, content)).encode("utf-8")


__all__ = [
    "DELIMITER",
    "escape_content",
    "unescape_content",
    "format_timestamp",
    "parse_timestamp",
    "encode_marker",
    "canonical_fields",
    "build_canonical_message",
]
