"""
Signal extractors.

Each parser looks at one kind of evidence and returns at most one
CandidateType. The registry decides how their results combine:

    corroborates = False   kept as-is, a later duplicate type is dropped
    corroborates = True    merges into an existing candidate of the same
                           type with the agreement boost
"""

import re
from typing import Optional

from autofill.classifier.rules import (
    AUTOCOMPLETE_MAP,
    LABEL_RULES,
    NAME_ID_RULES,
    SECTION_BOOSTS,
    TYPE_MAP,
    first_match,
)
from autofill.config import SCORES, Scores
from autofill.types import CandidateType, FieldContext, Taxonomy

_LABEL_TRAILER = re.compile(r"[\s*:：?？]+$")


def normalize_label(text: str) -> str:
    """'First Name *:' -> 'first name'"""
    return _LABEL_TRAILER.sub("", (text or "").strip().lower())


def normalize_autocomplete(value: str) -> str:
    # "section-work shipping email" -> "email"
    tokens = (value or "").lower().split()
    return tokens[-1] if tokens else ""


class FieldParser:
    name = "FieldParser"
    priority = 0
    corroborates = True

    def can_parse(self, context: FieldContext) -> bool:
        return True

    def parse(self, context: FieldContext) -> Optional[CandidateType]:
        raise NotImplementedError

    def __repr__(self):
        return f"<{self.name} priority={self.priority}>"


class AutocompleteParser(FieldParser):
    name = "autocomplete"
    priority = 100
    corroborates = False

    def __init__(self, scores: Scores = SCORES):
        self.scores = scores

    def can_parse(self, context):
        return bool(context.attr("autocomplete"))

    def parse(self, context):
        raw = context.attr("autocomplete")
        taxonomy = AUTOCOMPLETE_MAP.get(normalize_autocomplete(raw))
        if taxonomy is None:
            return None
        return CandidateType(taxonomy, self.scores.autocomplete, [f'autocomplete="{raw}"'])


class TypeAttributeParser(FieldParser):
    name = "type"
    priority = 90
    corroborates = False

    def __init__(self, scores: Scores = SCORES):
        self.scores = scores

    def can_parse(self, context):
        return bool(context.attr("type")) or context.widget_signature.kind == "date"

    def parse(self, context):
        input_type = context.attr("type")
        taxonomy = TYPE_MAP.get(input_type.lower())
        if taxonomy is not None:
            return CandidateType(taxonomy, self.scores.type_attr, [f'type="{input_type}"'])
        if context.widget_signature.kind == "date":
            return CandidateType(Taxonomy.GRAD_DATE, self.scores.date_fallback, ["date input type"])
        return None


class NameIdParser(FieldParser):
    name = "name_id"
    priority = 80

    def __init__(self, scores: Scores = SCORES):
        self.scores = scores

    def can_parse(self, context):
        return bool(context.attr("name") or context.attr("id"))

    def parse(self, context):
        combined = " ".join(p for p in (context.attr("name"), context.attr("id")) if p).lower()
        hit = first_match(NAME_ID_RULES, combined)
        if hit is None:
            return None
        taxonomy, source = hit
        return CandidateType(taxonomy, self.scores.name_id, [f'name/id matches "{source}"'])


class LabelParser(FieldParser):
    name = "label"
    priority = 70

    def __init__(self, scores: Scores = SCORES):
        self.scores = scores

    def can_parse(self, context):
        return bool(context.label_text)

    def parse(self, context):
        hit = first_match(LABEL_RULES, normalize_label(context.label_text))
        if hit is None:
            return None
        taxonomy, source = hit
        score = self.scores.label
        reasons = [f'label matches "{source}"']

        boost = SECTION_BOOSTS.get(taxonomy)
        if boost is not None and context.section_title and boost.search(context.section_title):
            score += self.scores.section_boost
            reasons.append(f'section "{context.section_title}"')

        return CandidateType(taxonomy, score, reasons)
