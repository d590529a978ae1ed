from fastapi import FastAPI, HTTPException

from .config import rules_from_mapping
from .errors import ConfigError, InvalidKeyError
from .models import HealthResponse, NormalizedName, NormalizeRequest, NormalizeResponse, NormalizeSummary
from .normalize import normalize
from .rules import CharacterRules, default_rules

app = FastAPI(
    title="fnorm",
    description="Deterministic filename normalization to ASCII slugs",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.get("/rules", response_model=CharacterRules)
def default_rule_set():
    return default_rules()

@app.post("/normalize", response_model=NormalizeResponse)
def normalize_names(body: NormalizeRequest):
    try:
        rules = rules_from_mapping(body.rules) if body.rules else default_rules()
    except InvalidKeyError as exc:
        raise HTTPException(
            status_code=422,
            detail={"section": exc.section, "key": exc.key, "message": str(exc)},
        )
    except ConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    results = []
    for name in body.filenames:
        normalized = normalize(name, rules)
        results.append(NormalizedName(original=name, normalized=normalized, changed=normalized != name))

    changed = sum(1 for r in results if r.changed)
    return NormalizeResponse(
        results=results,
        summary=NormalizeSummary(total=len(results), changed=changed, unchanged=len(results) - changed),
    )
