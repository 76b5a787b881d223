"""
FastAPI wrapper around the field pipeline.

The browser extension does the real work in-page, but I keep an HTTP
version of the same pipeline so I can:

- run a saved HTML form through scan + classify without a browser
- check classifier / transformer behaviour from curl or a notebook
- hit the same code from the React dashboard later

All heavy lifting lives in autofill/; this file only converts JSON in and out.
"""

from __future__ import annotations

import logging
import os
import random
import socket
import sys
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from autofill.classifier.registry import classify
from autofill.dom import field_locator, parse_html
from autofill.scanner.fields import scan
from autofill.transformer.registry import transform_value
from autofill.types import SENSITIVE_TYPES, WIDGET_KINDS, FieldContext, Taxonomy, WidgetSignature

logger = logging.getLogger(__name__)

app = FastAPI(title="Autofill field pipeline")

# CORS stays wide open so the extension + local React dev server can both call it.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def context_from_payload(data: Dict[str, Any]) -> FieldContext:
    """
    Build a FieldContext from the camelCase JSON the extension sends.
    There's no live element on this side, so options come from optionsText only.
    """
    attributes = data.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise HTTPException(status_code=400, detail="attributes must be an object")

    kind = data.get("widgetKind") or "text"
    if kind not in WIDGET_KINDS:
        raise HTTPException(status_code=400, detail=f"unknown widgetKind {kind!r}")

    options = data.get("optionsText") or []
    if not isinstance(options, list):
        raise HTTPException(status_code=400, detail="optionsText must be a list")

    return FieldContext(
        label_text=str(data.get("labelText") or ""),
        section_title=str(data.get("sectionTitle") or ""),
        attributes={str(k): str(v) for k, v in attributes.items() if v is not None},
        options_text=[str(o) for o in options],
        widget_signature=WidgetSignature(kind=kind),
    )


def _taxonomy(value: Optional[str], field: str) -> Optional[Taxonomy]:
    if value is None:
        return None
    try:
        return Taxonomy(str(value).upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"unknown {field} {value!r}")


def _candidates(context: FieldContext) -> List[Dict[str, Any]]:
    return [c.to_dict() for c in classify(context)]


# === Health ===


@app.get("/health")
async def health() -> Dict[str, Any]:
    """Same shape the extension already checks for: just { "ok": true }."""
    return {"ok": True}


# === Scan ===


@app.post("/scan")
async def scan_html(body: Dict[str, Any] = Body(...)) -> List[Dict[str, Any]]:
    """
    Scan a whole HTML page.

    Input:
        { "html": "<form>...</form>", "url": "https://jobs.example.com/apply" }

    Output: one item per field, the serialized FieldContext plus
    fieldLocator and its ranked candidates.
    """
    html = (body or {}).get("html")
    if not isinstance(html, str) or not html.strip():
        raise HTTPException(status_code=400, detail="html is required")

    result = scan(parse_html(html))
    logger.info("scan %s: %s", (body or {}).get("url") or "<inline>", result.stats.to_dict())

    items = []
    for context in result.fields:
        item = context.to_dict()
        item["fieldLocator"] = field_locator(context.element)
        item["candidates"] = _candidates(context)
        items.append(item)
    return items


# === Classification ===


@app.post("/classify")
async def classify_field(body: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    """
    Classify one field description.

    Input:
        { "labelText": "Email Address", "attributes": { "name": "email" } }

    Output:
        { "candidates": [ { "type": "EMAIL", "score": 0.85, "reasons": [...] } ], "sensitive": false }

    "sensitive" flags a top type the extension should ask about before filling.
    """
    if not body:
        raise HTTPException(status_code=400, detail="empty field")
    candidates = classify(context_from_payload(body))
    return {
        "candidates": [c.to_dict() for c in candidates],
        "sensitive": candidates[0].type in SENSITIVE_TYPES,
    }


@app.post("/classify_batch")
async def classify_batch(body: Dict[str, Any] = Body(...)) -> List[List[Dict[str, Any]]]:
    """Batch version of /classify: { "fields": [ {...}, {...} ] } -> list of candidate lists."""
    fields = (body or {}).get("fields")
    if not isinstance(fields, list):
        raise HTTPException(status_code=400, detail="fields must be a list")

    results = []
    for data in fields:
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="each field must be an object")
        results.append(_candidates(context_from_payload(data)))
    return results


# === Transformation ===


@app.post("/transform")
async def transform(body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """
    Convert a stored value for one target field.

    Input:
        {
          "value": "+14155551234",
          "sourceType": "PHONE",
          "target": { "attributes": { "placeholder": "(555) 555-5555" } }
        }

    Output:
        { "value": "(415) 555-1234", "changed": true }
    """
    value = (body or {}).get("value")
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail="value must be a string")

    source_type = _taxonomy(body.get("sourceType"), "sourceType")
    if source_type is None:
        raise HTTPException(status_code=400, detail="sourceType is required")
    target_type = _taxonomy(body.get("targetType"), "targetType")

    target = body.get("target") or {}
    if not isinstance(target, dict):
        raise HTTPException(status_code=400, detail="target must be an object")

    out = transform_value(value, source_type, context_from_payload(target), target_type)
    return {"value": out, "changed": out != value}


def choose_dev_port() -> int:
    """
    Pick a port for the dev server.

    AUTOFILL_PORT wins if set. Otherwise grab a free one from a small pool
    so the extension only has to probe a few ports.
    """
    env_port = os.getenv("AUTOFILL_PORT")
    if env_port:
        try:
            return int(env_port)
        except ValueError:
            print(f"[warn] Ignoring invalid AUTOFILL_PORT={env_port!r}", file=sys.stderr)

    candidates = [6000, 6001, 6002, 6003, 6004]
    random.shuffle(candidates)
    for port in candidates:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            try:
                sock.bind(("127.0.0.1", port))
            except OSError:
                continue
            return port

    return 6000


# === Run the server ===
#   python -m backend.fastapi_app
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    port = choose_dev_port()
    print(f"*** Autofill field pipeline listening on http://127.0.0.1:{port} ***")
    uvicorn.run(app, host="127.0.0.1", port=port)
