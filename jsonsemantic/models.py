from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class CompareRequest(BaseModel):
    state: str = Field(description="Previously persisted JSON text")
    config: str = Field(description="Newly supplied JSON text")
    optional_fields: Optional[List[str]] = Field(default=None, examples=[None])


class CompareResponse(BaseModel):
    equal: bool
    planned_value: str


class CanonicalizeRequest(BaseModel):
    text: str


class CanonicalizeResponse(BaseModel):
    canonical: str
    sha256: str


class DecodeReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str = "utf-8-sig"
    decode_fallback: bool = False


class CanonicalizeFileResponse(CanonicalizeResponse):
    filename: str
    decoding: DecodeReport


class PolicyResponse(BaseModel):
    optional_fields: List[str] = Field(default_factory=list)
    key_field: str
    max_depth: int
    description: str


class HealthResponse(BaseModel):
    ok: bool = True
