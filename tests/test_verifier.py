import base64

import pytest

from webproof.errors import MalformedProofError
from webproof.generator import generate_proof
from webproof.keys import derive_signing_identity
from webproof.verifier import check_proof, verify_proof

T0 = 1_700_000_000


@pytest.fixture()
def issued():
    return generate_proof(b"abc", "price=100", b"inst", timestamp=T0)


def test_end_to_end_scenario(issued):
    proof, pub = issued
    assert verify_proof(proof, pub, 300, now=T0 + 10) is True
    assert verify_proof(proof, pub, 300, now=T0 + 301) is False
    other = derive_signing_identity(b"abc", b"other-instance").public_bytes()
    assert verify_proof(proof, other, 300, now=T0 + 10) is False


def test_valid_immediately(issued):
    proof, pub = issued
    assert verify_proof(proof, pub, 0, now=T0) is True


@pytest.mark.parametrize("elapsed", [1, 10, 299])
def test_freshness_boundary_is_strict(issued, elapsed):
    proof, pub = issued
    now = T0 + elapsed
    assert verify_proof(proof, pub, elapsed - 1, now=now) is False
    assert verify_proof(proof, pub, elapsed, now=now) is True
    assert verify_proof(proof, pub, elapsed + 1, now=now) is True


def test_stale_reason(issued):
    proof, pub = issued
    res = check_proof(proof, pub, 60, now=T0 + 61)
    assert res.verified is False
    assert res.failure_reason == "stale"
    assert res.age_sec == 61


def test_future_timestamp_beyond_skew(issued):
    proof, pub = issued
    assert check_proof(proof, pub, 300, now=T0 - 5, max_clock_skew=30).verified is True
    res = check_proof(proof, pub, 300, now=T0 - 31, max_clock_skew=30)
    assert res.verified is False
    assert res.failure_reason == "future_timestamp"


def test_tampered_content(issued):
    proof, pub = issued
    tampered = proof.replace("price=100", "price=999")
    res = check_proof(tampered, pub, 300, now=T0)
    assert res.verified is False
    assert res.failure_reason == "bad_signature"


def test_tampered_timestamp(issued):
    proof, pub = issued
    tampered = proof.replace(f"|{T0}|", f"|{T0 + 1}|")
    assert verify_proof(tampered, pub, 300, now=T0) is False


def test_appended_character(issued):
    proof, pub = issued
    assert verify_proof(proof + "x", pub, 300, now=T0) is False


def test_garbage_signature_is_false_not_error(issued):
    proof, pub = issued
    head = proof.rsplit("|", 1)[0]
    for sig in ("AAAAAAA", "not base64!", base64.b64encode(b"\x00" * 64).decode()):
        res = check_proof(f"{head}|{sig}", pub, 300, now=T0)
        assert res.verified is False
        assert res.failure_reason == "bad_signature"


def test_bad_public_key(issued):
    proof, _ = issued
    res = check_proof(proof, b"short", 300, now=T0)
    assert res.verified is False
    assert res.failure_reason == "bad_public_key"


def test_session_isolation():
    p1, pub1 = generate_proof(b"session-1", "same", b"i", timestamp=T0)
    p2, pub2 = generate_proof(b"session-2", "same", b"i", timestamp=T0)
    assert pub1 != pub2
    assert p1 != p2
    assert verify_proof(p1, pub2, 300, now=T0) is False
    assert verify_proof(p1, pub1, 300, now=T0) is True


def test_malformed_raises():
    with pytest.raises(MalformedProofError):
        verify_proof("This is not a valid webproof", b"\x00" * 32, 300)


def test_public_key_as_base64_string(issued):
    proof, pub = issued
    assert verify_proof(proof, base64.b64encode(pub).decode(), 300, now=T0) is True


def test_default_max_age_from_config(issued, monkeypatch):
    import webproof.verifier as verifier
    proof, pub = issued
    monkeypatch.setattr(verifier, "MAX_AGE_SEC", 5)
    assert verify_proof(proof, pub, now=T0 + 5) is True
    assert verify_proof(proof, pub, now=T0 + 6) is False


def test_verify_is_idempotent(issued):
    proof, pub = issued
    results = {verify_proof(proof, pub, 300, now=T0 + 1) for _ in range(5)}
    assert results == {True}
