"""Proof verification.

Policy: structural decoding failures raise MalformedProofError. Everything a
syntactically valid proof can fail on (staleness, clock skew, signature bytes,
public key, signature mismatch) is reported as a negative result, never raised.
"""
from __future__ import annotations

import time
from typing import Optional

from cryptography.exceptions import InvalidSignature

from .codec import decode_proof
from .config import MAX_AGE_SEC, MAX_CLOCK_SKEW_SEC
from .keys import PublicKeyLike, load_public_key
from .message import encode_marker
from .metrics import WP_VERIFICATIONS
from .models import VerificationResult
from .utils.logging import get_logger

SIGNATURE_LEN = 64

log = get_logger("verifier")


def _reject(result: VerificationResult) -> VerificationResult:
    log.info("webproof rejected: reason=%s marker=%s age=%s",
             result.failure_reason, (result.session_marker_b64 or "")[:12], result.age_sec)
    WP_VERIFICATIONS.labels(result=result.failure_reason).inc()
    return result


def check_proof(
    encoded: str,
    public_key: PublicKeyLike,
    max_age: Optional[int] = None,
    *,
    now: Optional[int] = None,
    max_clock_skew: Optional[int] = None,
) -> VerificationResult:
    """Verify an encoded proof and report why it failed, if it did.

    Raises MalformedProofError only when the record cannot be decoded.
    """
    proof = decode_proof(encoded)
    max_age = MAX_AGE_SEC if max_age is None else max_age
    skew = MAX_CLOCK_SKEW_SEC if max_clock_skew is None else max_clock_skew
    current = int(time.time()) if now is None else int(now)

    age = current - proof.timestamp
    marker_b64 = encode_marker(proof.session_marker)
    result = VerificationResult(verified=False, age_sec=age, session_marker_b64=marker_b64)

    # 1. Freshness (age == max_age is still fresh)
    if age > max_age:
        result.failure_reason = "stale"
        return _reject(result)
    if -age > skew:
        result.failure_reason = "future_timestamp"
        return _reject(result)

    # 2. Public key
    pk = load_public_key(public_key)
    if pk is None:
        result.failure_reason = "bad_public_key"
        return _reject(result)

    # 3. Signature over the rebuilt canonical message
    try:
        sig = proof.signature()
    except ValueError:
        result.failure_reason = "bad_signature"
        return _reject(result)
    if len(sig) != SIGNATURE_LEN:
        result.failure_reason = "bad_signature"
        return _reject(result)
    try:
        pk.verify(sig, proof.canonical_message())
    except InvalidSignature:
        result.failure_reason = "bad_signature"
        return _reject(result)

    result.verified = True
    WP_VERIFICATIONS.labels(result="ok").inc()
    return result


def verify_proof(
    encoded: str,
    public_key: PublicKeyLike,
    max_age: Optional[int] = None,
    *,
    now: Optional[int] = None,
    max_clock_skew: Optional[int] = None,
) -> bool:
    return check_proof(encoded, public_key, max_age, now=now, max_clock_skew=max_clock_skew).verified


__all__ = ["check_proof", "verify_proof"]
