"""Tool invocation result contract.

Every tools/call answer is exactly one text content item. A success carries the
executor payload serialized as JSON; a failure carries ``{"error": message}``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class InvocationResult(BaseModel):
    ok: bool
    payload: Any = None
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _payload_xor_error(self) -> "InvocationResult":
        if self.ok and self.error is not None:
            raise ValueError("successful result must not carry an error")
        if not self.ok:
            if not self.error:
                raise ValueError("failed result must carry an error message")
            if self.payload is not None:
                raise ValueError("failed result must not carry a payload")
        return self

    @classmethod
    def success(cls, payload: Any) -> "InvocationResult":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, message: str) -> "InvocationResult":
        return cls(ok=False, error=str(message or "unknown error"))

    def to_text(self) -> str:
        if self.ok:
            return json.dumps(self.payload, ensure_ascii=False)
        return json.dumps({"error": self.error}, ensure_ascii=False)

    def to_envelope(self) -> Dict[str, List[Dict[str, str]]]:
        """Plain-dict response envelope: ``{"content": [{"type": "text", "text": ...}]}``."""
        return {"content": [{"type": "text", "text": self.to_text()}]}
