from __future__ import annotations

import argparse
import base64
import binascii
import json
import sys

from .binding import StaticBindingSource
from .config import MAX_AGE_SEC
from .content import EthereumPriceSource, JsonFieldSource, StaticContentSource
from .errors import MalformedProofError, WebProofError
from .generator import ProofGenerator
from .verifier import check_proof


def _fail(msg: str) -> int:
    print(json.dumps({"ok": False, "error": msg}), file=sys.stderr)
    return 1


def _generator(args: argparse.Namespace, content_source) -> ProofGenerator:
    """Build a generator from CLI args; raises ValueError on undecodable input."""
    try:
        binding = base64.b64decode(args.binding_b64, validate=True)
    except binascii.Error as e:
        raise ValueError(f"--binding-b64 is not valid base64: {e}") from e
    instance_id = None
    if args.instance_id_hex:
        try:
            instance_id = bytes.fromhex(args.instance_id_hex)
        except ValueError as e:
            raise ValueError(f"--instance-id-hex is not valid hex: {e}") from e
    return ProofGenerator(StaticBindingSource(binding), content_source, instance_id=instance_id)


def cmd_pubkey(args: argparse.Namespace) -> int:
    try:
        gen = _generator(args, StaticContentSource(""))
        print(gen.public_key_b64())
    except (ValueError, WebProofError) as e:
        return _fail(str(e))
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    if args.eth_price:
        source = EthereumPriceSource()
    elif args.url:
        source = JsonFieldSource(args.url, args.path, args.template)
    else:
        source = StaticContentSource(args.content)
    try:
        gen = _generator(args, source)
        proof = gen.generate_sync()
    except (ValueError, WebProofError) as e:
        return _fail(str(e))
    print(json.dumps({
        "proof": proof,
        "public_key_b64": gen.public_key_b64(),
        "instance_id_hex": gen.instance_id.hex(),
    }, indent=2))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    proof = args.proof.strip()
    try:
        res = check_proof(proof, args.public_key, args.max_age)
    except MalformedProofError as e:
        print(json.dumps({"verified": False, "error": f"malformed: {e}"}))
        return 2
    print(json.dumps({"verified": res.verified, "failure_reason": res.failure_reason}))
    return 0 if res.verified else 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser("webproof")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_pub = sub.add_parser("pubkey", help="print the base64 public key for a binding + instance id")
    p_pub.add_argument("--binding-b64", dest="binding_b64", required=True)
    p_pub.add_argument("--instance-id-hex", dest="instance_id_hex", required=True)
    p_pub.set_defaults(func=cmd_pubkey)

    p_gen = sub.add_parser("generate")
    p_gen.add_argument("--binding-b64", dest="binding_b64", required=True)
    p_gen.add_argument("--instance-id-hex", dest="instance_id_hex")
    src = p_gen.add_mutually_exclusive_group(required=True)
    src.add_argument("--content")
    src.add_argument("--eth-price", dest="eth_price", action="store_true")
    src.add_argument("--url")
    p_gen.add_argument("--path", default="value", help="dotted JSON path used with --url")
    p_gen.add_argument("--template", default="{value}")
    p_gen.set_defaults(func=cmd_generate)

    p_ver = sub.add_parser("verify")
    p_ver.add_argument("--proof", required=True)
    p_ver.add_argument("--public-key", dest="public_key", required=True, help="base64, hex or PEM")
    p_ver.add_argument("--max-age", dest="max_age", type=int, default=MAX_AGE_SEC)
    p_ver.set_defaults(func=cmd_verify)

    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
