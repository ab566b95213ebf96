from __future__ import annotations

from prometheus_client import Counter

# Prometheus metrics (proof issuance and verification)
WP_GENERATED = Counter("webproof_proofs_generated_total", "Proofs issued")
WP_GEN_FAILURES = Counter("webproof_generation_failures_total", "Proof generation failures", ["stage"])
WP_VERIFICATIONS = Counter("webproof_verifications_total", "Proof verification outcomes", ["result"])
