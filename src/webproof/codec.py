"""Proof record encoding.

Wire format (one line, exactly four fields):

    <session-marker-b64>|<timestamp>|<escaped-content>|<signature-b64>

Decoding checks structure only: field count, marker encoding and version,
timestamp form, and content escapes. Whether the signature is valid (or even
decodes) is left to the verifier.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from .errors import MalformedProofError
from .keys import FORMAT_VERSION, MARKER_LEN
from .message import (
    DELIMITER,
    build_canonical_message,
    canonical_fields,
    encode_marker,
    parse_timestamp,
    unescape_content,
)

FIELD_COUNT = 4


@dataclass(frozen=True)
class Proof:
    session_marker: bytes
    timestamp: int
    content: str
    signature_b64: str

    def canonical_message(self) -> bytes:
        return build_canonical_message(self.session_marker, self.timestamp, self.content)

    def signature(self) -> bytes:
        """Decode the signature field; raises ValueError unless it is canonical base64."""
        sig = base64.b64decode(self.signature_b64, validate=True)
        # b64decode ignores non-zero pad bits; two encodings must not share one signature
        if base64.b64encode(sig).decode("ascii") != self.signature_b64:
            raise ValueError("signature is not canonically encoded")
        return sig


def encode_proof(proof: Proof) -> str:
    if not proof.signature_b64:
        raise ValueError("proof has no signature")
    fields = canonical_fields(proof.session_marker, proof.timestamp, proof.content)
    fields.append(proof.signature_b64)
    return DELIMITER.join(fields)


def _decode_marker(field: str) -> bytes:
    try:
        marker = base64.b64decode(field, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedProofError("session marker is not valid base64") from e
    if encode_marker(marker) != field:
        raise MalformedProofError("session marker is not canonically encoded")
    if len(marker) != MARKER_LEN:
        raise MalformedProofError(f"session marker must be {MARKER_LEN} bytes")
    if marker[0] != FORMAT_VERSION:
        raise MalformedProofError(f"unsupported proof format version {marker[0]}")
    return marker


def decode_proof(text: str) -> Proof:
    if not isinstance(text, str):
        raise MalformedProofError("proof must be text")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedProofError("proof is not valid UTF-8 text") from e
    parts = text.split(DELIMITER)
    if len(parts) != FIELD_COUNT:
        raise MalformedProofError(f"expected {FIELD_COUNT} fields, got {len(parts)}")
    marker_s, ts_s, content_s, sig_s = parts
    marker = _decode_marker(marker_s)
    try:
        timestamp = parse_timestamp(ts_s)
    except ValueError as e:
        raise MalformedProofError(str(e)) from e
    try:
        content = unescape_content(content_s)
    except ValueError as e:
        raise MalformedProofError(str(e)) from e
    if not sig_s:
        raise MalformedProofError("empty signature field")
    return Proof(session_marker=marker, timestamp=timestamp, content=content, signature_b64=sig_s)


__all__ = ["FIELD_COUNT", "Proof", "encode_proof", "decode_proof"]
