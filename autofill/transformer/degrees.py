import re
from typing import Dict, List, Optional

from autofill.transformer.base import ValueTransformer, has_cjk
from autofill.types import Taxonomy

# canonical key -> aliases, checked in this order
DEGREE_ALIASES: Dict[str, List[str]] = {
    "bachelors": ["bachelor", "undergraduate", "bs", "ba", "bsc", "beng", "本科", "学士"],
    "masters": ["master", "graduate", "ms", "ma", "msc", "meng", "mba", "硕士", "研究生"],
    "phd": ["phd", "doctorate", "doctoral", "doctor", "博士"],
    "associate": ["associate", "aa", "as", "专科", "大专"],
    "high school": ["high school", "secondary", "ged", "hs", "高中"],
}

_STRIP = re.compile(r"[.']")
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def _normalize(text: str) -> str:
    return _STRIP.sub("", (text or "").lower()).strip()


def _matches(alias: str, text: str, tokens: List[str]) -> bool:
    if has_cjk(alias):
        return alias in text
    if len(alias) <= 3:
        # "ms" must not fire inside "systems"
        return alias in tokens
    return alias in text


def canonical_degree(text: str) -> Optional[str]:
    normalized = _normalize(text)
    if not normalized:
        return None
    tokens = [t for t in _TOKEN_SPLIT.split(normalized) if t]
    for key, aliases in DEGREE_ALIASES.items():
        if normalized == key or any(_matches(a, normalized, tokens) for a in aliases):
            return key
    return None


class DegreeTransformer(ValueTransformer):
    name = "DegreeTransformer"
    source_type = Taxonomy.DEGREE
    target_types = (Taxonomy.DEGREE,)

    def can_transform(self, value, target):
        return bool(value and value.strip())

    def transform(self, value, target):
        options = [o for o in target.live_options() if o.strip()]
        if not options:
            return value
        key = canonical_degree(value)
        if key is None:
            return value
        for option in options:
            if canonical_degree(option) == key:
                return option
        return value
