"""Proof generation.

ProofGenerator composes a session binding source and a content source. Each
call re-derives the signing key from the current binding; nothing secret is
kept on the instance. The only mutable-looking attribute, ``instance_id``, is
fixed at construction.
"""
from __future__ import annotations

import base64
import inspect
import os
import time
from typing import Callable, Optional, Tuple

import anyio

from .binding import SessionBindingSource
from .codec import Proof, encode_proof
from .content import ContentSource
from .errors import ContentExtractionError, KeyDerivationError
from .keys import SigningIdentity, derive_session_marker, derive_signing_identity, public_key_b64
from .message import build_canonical_message, encode_marker
from .metrics import WP_GENERATED, WP_GEN_FAILURES
from .utils.logging import get_logger

INSTANCE_ID_LEN = 16

log = get_logger("generator")


def _issue(identity: SigningIdentity, marker: bytes, ts: int, content: str) -> str:
    if not isinstance(content, str):
        raise ContentExtractionError(f"content must be str, got {type(content).__name__}")
    try:
        message = build_canonical_message(marker, ts, content)
    except UnicodeEncodeError as e:
        raise ContentExtractionError("content is not encodable as UTF-8") from e
    sig_b64 = base64.b64encode(identity.sign(message)).decode("ascii")
    return encode_proof(Proof(session_marker=marker, timestamp=ts, content=content, signature_b64=sig_b64))


def generate_proof(
    binding: Optional[bytes],
    content: str,
    extra: bytes = b"",
    timestamp: Optional[int] = None,
) -> Tuple[str, bytes]:
    """Build and sign a proof from explicit inputs.

    Returns (encoded_proof, raw_public_key).
    """
    identity = derive_signing_identity(binding, extra)
    marker = derive_session_marker(binding)
    ts = int(time.time()) if timestamp is None else timestamp
    return _issue(identity, marker, ts, content), identity.public_bytes()


class ProofGenerator:
    def __init__(
        self,
        session_source: SessionBindingSource,
        content_source: ContentSource,
        instance_id: Optional[bytes] = None,
        clock: Callable[[], float] = time.time,
    ):
        if instance_id is None:
            instance_id = os.urandom(INSTANCE_ID_LEN)
        if not isinstance(instance_id, (bytes, bytearray)):
            raise TypeError("instance_id must be bytes")
        self._session_source = session_source
        self._content_source = content_source
        self._instance_id = bytes(instance_id)
        self._clock = clock

    @property
    def instance_id(self) -> bytes:
        return self._instance_id

    def _binding(self) -> bytes:
        binding = self._session_source.negotiated_binding_material()
        if not binding:
            raise KeyDerivationError("no session binding negotiated; refusing to issue proof")
        return binding

    def public_key(self) -> bytes:
        return derive_signing_identity(self._binding(), self._instance_id).public_bytes()

    def public_key_b64(self) -> str:
        return public_key_b64(self.public_key())

    async def _extract(self) -> str:
        try:
            out = self._content_source.extract(self._session_source)
            if inspect.isawaitable(out):
                out = await out
        except ContentExtractionError:
            WP_GEN_FAILURES.labels(stage="content").inc()
            raise
        except Exception as e:
            WP_GEN_FAILURES.labels(stage="content").inc()
            raise ContentExtractionError(f"content source failed: {e}") from e
        if not isinstance(out, str):
            WP_GEN_FAILURES.labels(stage="content").inc()
            raise ContentExtractionError(f"content source returned {type(out).__name__}, expected str")
        return out

    async def generate(self) -> str:
        try:
            binding = self._binding()
            identity = derive_signing_identity(binding, self._instance_id)
            marker = derive_session_marker(binding)
        except KeyDerivationError:
            WP_GEN_FAILURES.labels(stage="binding").inc()
            raise
        content = await self._extract()
        ts = int(self._clock())
        proof = _issue(identity, marker, ts, content)
        WP_GENERATED.inc()
        log.info("webproof issued: marker=%s ts=%d", encode_marker(marker)[:12], ts)
        return proof

    def generate_sync(self) -> str:
        return anyio.run(self.generate)


__all__ = ["ProofGenerator", "generate_proof", "INSTANCE_ID_LEN"]
