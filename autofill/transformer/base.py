import re
from typing import Iterable, Optional, Tuple

from autofill.types import FieldContext, Taxonomy

CJK_RE = re.compile(r"[一-龥]")


def has_cjk(text: str) -> bool:
    return bool(CJK_RE.search(text or ""))


def target_hints(target: FieldContext) -> str:
    """Label + name + id of the target, lowercased. What transformers sniff for sub-types."""
    parts = (target.label_text, target.attr("name"), target.attr("id"))
    return " ".join(p for p in parts if p).lower()


def token_pattern(token: str):
    """Whole-word regex for ASCII tokens, plain substring for CJK ones."""
    if has_cjk(token):
        return re.compile(re.escape(token))
    return re.compile(r"(?<![a-z0-9])" + re.escape(token) + r"(?![a-z0-9])", re.I)


class ValueTransformer:
    """
    Converts a stored value into the variant one target control needs.

    transform() may read the target's live option list but must not change
    anything, and must return the input unchanged when it has nothing better.
    """

    name = "ValueTransformer"
    source_type: Taxonomy = Taxonomy.UNKNOWN
    target_types: Tuple[Taxonomy, ...] = ()

    def handles(self, types: Iterable[Taxonomy]) -> bool:
        mine = {self.source_type, *self.target_types}
        return any(t in mine for t in types)

    def can_transform(self, value: str, target: FieldContext) -> bool:
        return bool(value)

    def transform(self, value: str, target: FieldContext) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"<{self.name}>"


def pick_option(options, predicate) -> Optional[str]:
    for option in options:
        if option and predicate(option):
            return option
    return None
