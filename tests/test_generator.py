import anyio
import pytest

from webproof.binding import CipherSuiteBindingSource, StaticBindingSource
from webproof.content import StaticContentSource
from webproof.errors import ContentExtractionError, KeyDerivationError
from webproof.generator import ProofGenerator
from webproof.verifier import verify_proof

T0 = 1_700_000_000


def _tls():
    return CipherSuiteBindingSource("TLS_AES_256_GCM_SHA384")


class AsyncSource:
    def __init__(self, text):
        self.text = text
        self.seen = None

    async def extract(self, session_context):
        self.seen = session_context
        await anyio.sleep(0)
        return self.text


class FailingSource:
    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    def extract(self, session_context):
        self.calls += 1
        raise self.exc


def test_generate_and_verify_valid_webproof():
    gen = ProofGenerator(_tls(), StaticContentSource("Mock web content"))
    proof = gen.generate_sync()
    assert verify_proof(proof, gen.public_key(), 300) is True
    assert proof.split("|")[2] == "Mock web content"


def test_async_content_source_receives_session_context():
    tls = _tls()
    src = AsyncSource("price=100")
    gen = ProofGenerator(tls, src, clock=lambda: T0)
    proof = anyio.run(gen.generate)
    assert src.seen is tls
    assert proof.split("|")[1] == str(T0)
    assert verify_proof(proof, gen.public_key(), 300, now=T0 + 10) is True


def test_tampered_proof_invalid():
    gen = ProofGenerator(_tls(), StaticContentSource("Mock web content"))
    proof = gen.generate_sync()
    assert verify_proof(proof + "x", gen.public_key(), 300) is False


def test_different_generator_different_key():
    tls = _tls()
    gen = ProofGenerator(tls, StaticContentSource("Mock web content"))
    other = ProofGenerator(tls, StaticContentSource("Different content"))
    proof = gen.generate_sync()
    assert gen.public_key() != other.public_key()
    assert verify_proof(proof, gen.public_key(), 300) is True
    assert verify_proof(proof, other.public_key(), 300) is False


def test_explicit_instance_id_is_reproducible():
    a = ProofGenerator(_tls(), StaticContentSource("x"), instance_id=b"\x01" * 16)
    b = ProofGenerator(_tls(), StaticContentSource("y"), instance_id=b"\x01" * 16)
    assert a.public_key() == b.public_key()
    assert a.instance_id == b"\x01" * 16
    proof = a.generate_sync()
    assert verify_proof(proof, b.public_key_b64(), 300) is True


@pytest.mark.parametrize("source", [CipherSuiteBindingSource(None), CipherSuiteBindingSource(""), StaticBindingSource(b"")])
def test_unbound_channel_refused(source):
    content = FailingSource(RuntimeError("should not be called"))
    gen = ProofGenerator(source, content)
    with pytest.raises(KeyDerivationError):
        gen.generate_sync()
    with pytest.raises(KeyDerivationError):
        gen.public_key()
    assert content.calls == 0


def test_content_error_wrapped():
    gen = ProofGenerator(_tls(), FailingSource(ValueError("upstream down")))
    with pytest.raises(ContentExtractionError) as ei:
        gen.generate_sync()
    assert isinstance(ei.value.__cause__, ValueError)


def test_content_extraction_error_passes_through():
    err = ContentExtractionError("boom")
    gen = ProofGenerator(_tls(), FailingSource(err))
    with pytest.raises(ContentExtractionError) as ei:
        gen.generate_sync()
    assert ei.value is err


def test_non_string_content_rejected():
    class BytesSource:
        def extract(self, session_context):
            return b"bytes"
    gen = ProofGenerator(_tls(), BytesSource())
    with pytest.raises(ContentExtractionError):
        gen.generate_sync()


def test_instance_id_must_be_bytes():
    with pytest.raises(TypeError):
        ProofGenerator(_tls(), StaticContentSource("x"), instance_id="abc")


def test_concurrent_generation_is_independent():
    gen = ProofGenerator(_tls(), AsyncSource("price=100"), clock=lambda: T0)
    proofs = []

    async def run():
        async def one():
            proofs.append(await gen.generate())
        async with anyio.create_task_group() as tg:
            for _ in range(8):
                tg.start_soon(one)

    anyio.run(run)
    assert len(proofs) == 8
    # Ed25519 is deterministic: same inputs, same proof
    assert len(set(proofs)) == 1
    assert verify_proof(proofs[0], gen.public_key(), 300, now=T0) is True
