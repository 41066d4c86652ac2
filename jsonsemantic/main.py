import logging

from fastapi import FastAPI, UploadFile, File, HTTPException

from .canonical import canonicalize, sha256_hex
from .config import settings
from .equality import semantic_equal
from .errors import JSONSemanticError
from .models import (
    CanonicalizeFileResponse,
    CanonicalizeRequest,
    CanonicalizeResponse,
    CompareRequest,
    CompareResponse,
    HealthResponse,
    PolicyResponse,
)
from .normalize import NormalizationPolicy
from .rules import DESCRIPTION, KEY_FIELD
from .values import decode_bytes

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Semantic JSON comparison and canonicalization for configuration management",
    version=settings.APP_VERSION,
)


def _canonical_or_422(text: str) -> str:
    try:
        return canonicalize(text, max_depth=settings.MAX_DEPTH)
    except JSONSemanticError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict())


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/policy", response_model=PolicyResponse)
def policy():
    return {
        "optional_fields": sorted(settings.policy().optional_fields),
        "key_field": KEY_FIELD,
        "max_depth": settings.MAX_DEPTH,
        "description": DESCRIPTION,
    }


@app.post("/compare", response_model=CompareResponse)
def compare(req: CompareRequest):
    if req.optional_fields is None:
        active = settings.policy()
    else:
        active = NormalizationPolicy(frozenset(req.optional_fields))

    is_equal = semantic_equal(req.state, req.config, active, max_depth=settings.MAX_DEPTH)
    # Same rule as resolve_planned_value, without comparing twice
    planned = req.state if is_equal else req.config
    if is_equal and req.state != req.config:
        logger.info("config is semantically equal to state; keeping stored value")

    return {"equal": is_equal, "planned_value": planned}


@app.post("/canonicalize", response_model=CanonicalizeResponse)
def canonicalize_text(req: CanonicalizeRequest):
    canonical = _canonical_or_422(req.text)
    return {"canonical": canonical, "sha256": sha256_hex(canonical)}


@app.post("/canonicalize/file", response_model=CanonicalizeFileResponse)
async def canonicalize_file(file: UploadFile = File(...)):
    if not file.filename.lower().endswith(".json"):
        raise HTTPException(status_code=422, detail="Only JSON files are supported")

    raw = await file.read()
    if len(raw) > settings.MAX_REQUEST_SIZE:
        raise HTTPException(status_code=413, detail="Request body too large")

    text, report = decode_bytes(raw)
    canonical = _canonical_or_422(text)
    return {
        "filename": file.filename,
        "canonical": canonical,
        "sha256": sha256_hex(canonical),
        "decoding": report,
    }
