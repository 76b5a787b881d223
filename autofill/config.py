"""
Runtime knobs for the field pipeline.

Same approach as the backend: load .env once, then read everything with
os.getenv + a default so local/dev works with nothing set. The scoring
numbers are tunable; what actually matters is their ordering
(autocomplete > type > name/id > label, agreement > any single signal).
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def _int(name: str, default: int) -> int:
    return int(_float(name, float(default)))


@dataclass(frozen=True)
class Scores:
    autocomplete: float = _float("AUTOFILL_SCORE_AUTOCOMPLETE", 0.95)
    type_attr: float = _float("AUTOFILL_SCORE_TYPE", 0.85)
    date_fallback: float = _float("AUTOFILL_SCORE_DATE_FALLBACK", 0.5)
    name_id: float = _float("AUTOFILL_SCORE_NAME_ID", 0.75)
    label: float = _float("AUTOFILL_SCORE_LABEL", 0.65)
    section_boost: float = _float("AUTOFILL_SCORE_SECTION_BOOST", 0.15)
    agreement_boost: float = _float("AUTOFILL_SCORE_AGREEMENT_BOOST", 0.1)
    model_ceiling: float = _float("AUTOFILL_SCORE_MODEL_CEILING", 0.6)
    model_min_probability: float = _float("AUTOFILL_SCORE_MODEL_MIN_PROBABILITY", 0.5)


@dataclass(frozen=True)
class LabelHeuristics:
    """Weights for the ancestor-text label search (last resort before placeholder)."""

    max_levels: int = _int("AUTOFILL_LABEL_MAX_LEVELS", 6)
    min_length: int = _int("AUTOFILL_LABEL_MIN_LENGTH", 5)
    ideal_length: int = _int("AUTOFILL_LABEL_IDEAL_LENGTH", 50)
    max_length: int = _int("AUTOFILL_LABEL_MAX_LENGTH", 200)
    too_long_penalty: int = 50
    type_bonus: Dict[str, int] = field(
        default_factory=lambda: {"label": 50, "legend": 40, "heading": 30, "text": 10}
    )
    level_penalty: int = 15
    question_bonus: int = 20
    error_penalty: int = 30


SCORES = Scores()
LABEL_HEURISTICS = LabelHeuristics()

# Recorder: wait this long after a submit-ish click so client-side
# validation gets a chance to block the submit first.
COMMIT_SETTLE_SECONDS = _float("AUTOFILL_COMMIT_SETTLE_SECONDS", 0.3)
DEFAULT_FORM_ID = "__default__"

# Optional scikit-learn label model (see models/train_form_model.py).
# Unset -> rule-based parsers only.
FORM_MODEL_PATH: Optional[str] = os.getenv("AUTOFILL_FORM_MODEL") or None
