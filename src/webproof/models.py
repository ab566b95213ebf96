from pydantic import BaseModel
from typing import Optional, Literal

FailureReason = Literal["stale", "future_timestamp", "bad_signature", "bad_public_key"]

class VerificationResult(BaseModel):
    verified: bool
    failure_reason: Optional[FailureReason] = None
    age_sec: Optional[int] = None
    session_marker_b64: Optional[str] = None
