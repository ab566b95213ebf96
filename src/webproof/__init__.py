"""Session-bound, independently verifiable web proofs."""
from .binding import (
    CipherSuiteBindingSource,
    ExporterHeaderBindingSource,
    SessionBindingSource,
    StaticBindingSource,
    TLSChannelBindingSource,
)
from .codec import Proof, decode_proof, encode_proof
from .content import ContentSource, EthereumPriceSource, JsonFieldSource, StaticContentSource, WeatherSource
from .errors import ContentExtractionError, KeyDerivationError, MalformedProofError, WebProofError
from .generator import ProofGenerator, generate_proof
from .keys import SigningIdentity, derive_session_marker, derive_signing_identity, load_public_key
from .message import build_canonical_message
from .models import VerificationResult
from .verifier import check_proof, verify_proof

__version__ = "0.1.0"

__all__ = [
    "CipherSuiteBindingSource",
    "ExporterHeaderBindingSource",
    "SessionBindingSource",
    "StaticBindingSource",
    "TLSChannelBindingSource",
    "Proof",
    "decode_proof",
    "encode_proof",
    "ContentSource",
    "EthereumPriceSource",
    "JsonFieldSource",
    "StaticContentSource",
    "WeatherSource",
    "ContentExtractionError",
    "KeyDerivationError",
    "MalformedProofError",
    "WebProofError",
    "ProofGenerator",
    "generate_proof",
    "SigningIdentity",
    "derive_session_marker",
    "derive_signing_identity",
    "load_public_key",
    "build_canonical_message",
    "VerificationResult",
    "check_proof",
    "verify_proof",
]
