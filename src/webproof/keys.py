"""Session-bound Ed25519 key derivation.

No private key is ever persisted. A signing identity is re-derived on demand
from the session binding plus per-generator entropy:

    seed   = HMAC-SHA256(binding, SEED_INFO || extra)
    sk     = Ed25519PrivateKey.from_private_bytes(seed)
    marker = FORMAT_VERSION || HMAC-SHA256(binding, MARKER_INFO)

The marker identifies the session inside a proof without revealing the binding.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from .errors import KeyDerivationError

FORMAT_VERSION = 1
SEED_INFO = b"WebProof-Ed25519-Seed/v1"
MARKER_INFO = b"WebProof-Session-Marker/v1"
MARKER_LEN = 1 + hashlib.sha256().digest_size
PUBLIC_KEY_LEN = 32

PublicKeyLike = Union[bytes, bytearray, str, Ed25519PublicKey]


@dataclass(frozen=True)
class SigningIdentity:
    private_key: Ed25519PrivateKey
    public_key: Ed25519PublicKey

    def public_bytes(self) -> bytes:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def sign(self, message: bytes) -> bytes:
        return self.private_key.sign(message)


def _require_binding(binding: Optional[bytes]) -> bytes:
    if binding is None:
        raise KeyDerivationError("no session binding negotiated")
    if not isinstance(binding, (bytes, bytearray)):
        raise KeyDerivationError("session binding must be bytes")
    if len(binding) == 0:
        raise KeyDerivationError("session binding is empty")
    return bytes(binding)


def derive_signing_identity(binding: Optional[bytes], extra: bytes = b"") -> SigningIdentity:
    """Derive the Ed25519 keypair for (binding, extra).

    Identical inputs always give the identical keypair; there is no randomness
    beyond what the caller passes in ``extra``.
    """
    key = _require_binding(binding)
    if not isinstance(extra, (bytes, bytearray)):
        raise KeyDerivationError("extra entropy must be bytes")
    seed = hmac.new(key, SEED_INFO + bytes(extra), hashlib.sha256).digest()
    sk = Ed25519PrivateKey.from_private_bytes(seed)
    return SigningIdentity(private_key=sk, public_key=sk.public_key())


def derive_session_marker(binding: Optional[bytes]) -> bytes:
    key = _require_binding(binding)
    return bytes([FORMAT_VERSION]) + hmac.new(key, MARKER_INFO, hashlib.sha256).digest()


def public_key_b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def load_public_key(key: PublicKeyLike) -> Optional[Ed25519PublicKey]:
    """Best-effort conversion of a caller-supplied public key.

    Accepts raw 32 bytes, an Ed25519PublicKey, or a string holding PEM,
    64 hex characters, or base64. Returns None when the key is unusable.
    """
    if isinstance(key, Ed25519PublicKey):
        return key
    raw: Optional[bytes] = None
    try:
        if isinstance(key, (bytes, bytearray)):
            raw = bytes(key)
        elif isinstance(key, str):
            text = key.strip()
            if text.startswith("-----BEGIN"):
                pk = serialization.load_pem_public_key(text.encode())
                return pk if isinstance(pk, Ed25519PublicKey) else None
            if len(text) == 2 * PUBLIC_KEY_LEN:
                try:
                    raw = bytes.fromhex(text)
                except ValueError:
                    raw = None
            if raw is None:
                raw = base64.b64decode(text, validate=True)
        if raw is None or len(raw) != PUBLIC_KEY_LEN:
            return None
        return Ed25519PublicKey.from_public_bytes(raw)
    except (ValueError, TypeError, binascii.Error, UnsupportedAlgorithm):
        return None


__all__ = [
    "FORMAT_VERSION",
    "MARKER_LEN",
    "SigningIdentity",
    "derive_signing_identity",
    "derive_session_marker",
    "public_key_b64",
    "load_public_key",
]
