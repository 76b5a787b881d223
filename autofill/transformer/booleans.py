from typing import Optional, Set

from autofill.transformer.base import ValueTransformer, token_pattern
from autofill.types import Taxonomy

TRUE_TOKENS = ["yes", "true", "1", "on", "是", "authorized", "i agree", "i confirm"]
FALSE_TOKENS = ["no", "false", "0", "off", "否", "not authorized", "i decline"]

# Longest first so "not authorized" is consumed before "authorized" can match.
_TOKENS = sorted(
    [(t, True) for t in TRUE_TOKENS] + [(t, False) for t in FALSE_TOKENS],
    key=lambda item: len(item[0]),
    reverse=True,
)
_PATTERNS = [(token_pattern(t), polarity) for t, polarity in _TOKENS]


def parse_bool(value: str) -> Optional[bool]:
    normalized = (value or "").strip().lower()
    if normalized in TRUE_TOKENS:
        return True
    if normalized in FALSE_TOKENS:
        return False
    return None


def option_polarity(text: str) -> Set[bool]:
    """Polarities mentioned by an option text; {True, False} means it is ambiguous."""
    remaining = (text or "").lower()
    found = set()
    for pattern, polarity in _PATTERNS:
        if pattern.search(remaining):
            found.add(polarity)
            remaining = pattern.sub(" ", remaining)
    return found


class BooleanTransformer(ValueTransformer):
    name = "BooleanTransformer"
    source_type = Taxonomy.WORK_AUTH
    target_types = (Taxonomy.WORK_AUTH, Taxonomy.NEED_SPONSORSHIP)

    def can_transform(self, value, target):
        return parse_bool(value) is not None

    def transform(self, value, target):
        wanted = parse_bool(value)
        if wanted is None:
            return value
        if target.widget_signature.kind == "checkbox":
            return "true" if wanted else "false"

        for option in target.live_options():
            if option_polarity(option) == {wanted}:
                return option
        return "Yes" if wanted else "No"
