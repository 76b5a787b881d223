"""
Parser registry + the candidate combination step.

classify(context) runs every applicable parser from highest to lowest
priority and folds their results into one list:

- a new type is appended
- a repeated type from a corroborating parser adds the agreement boost to
  the existing candidate (capped at 1.0) and appends its reasons
- a repeated type from a non-corroborating parser is dropped

The list is sorted by score, stable, so on a tie the candidate produced by the
higher-priority parser stays first. It is never empty: UNKNOWN/0 is the
answer when nothing matched.
"""

import logging
from typing import Iterable, List, Optional

from autofill.classifier.model_parser import load_model_parser
from autofill.classifier.parsers import (
    AutocompleteParser,
    FieldParser,
    LabelParser,
    NameIdParser,
    TypeAttributeParser,
)
from autofill.config import FORM_MODEL_PATH, SCORES, Scores
from autofill.types import CandidateType, FieldContext, Taxonomy

logger = logging.getLogger(__name__)


class ParserRegistry:
    def __init__(self, parsers: Iterable[FieldParser] = (), scores: Scores = SCORES):
        self.scores = scores
        self._parsers: List[FieldParser] = []
        for parser in parsers:
            self.register(parser)

    def register(self, parser: FieldParser) -> None:
        self._parsers.append(parser)
        # stable: equal priorities keep registration order
        self._parsers.sort(key=lambda p: p.priority, reverse=True)

    def unregister(self, name: str) -> None:
        self._parsers = [p for p in self._parsers if p.name != name]

    @property
    def parsers(self) -> List[FieldParser]:
        return list(self._parsers)

    def classify(self, context: FieldContext) -> List[CandidateType]:
        candidates: List[CandidateType] = []

        for parser in self._parsers:
            if not parser.can_parse(context):
                continue
            result = parser.parse(context)
            if result is None:
                continue

            existing = next((c for c in candidates if c.type is result.type), None)
            if existing is None:
                candidates.append(CandidateType(result.type, result.score, list(result.reasons)))
            elif parser.corroborates:
                existing.score = min(1.0, existing.score + self.scores.agreement_boost)
                existing.reasons.extend(result.reasons)

        if not candidates:
            candidates.append(CandidateType(Taxonomy.UNKNOWN, 0.0, ["no matching patterns"]))

        candidates.sort(key=lambda c: c.score, reverse=True)
        logger.debug(
            "classified %r -> %s",
            context.label_text or context.attr("name"),
            [(c.type.value, round(c.score, 3)) for c in candidates],
        )
        return candidates


def build_default_registry(model_path: Optional[str] = FORM_MODEL_PATH, scores: Scores = SCORES) -> ParserRegistry:
    registry = ParserRegistry(
        [
            AutocompleteParser(scores),
            TypeAttributeParser(scores),
            NameIdParser(scores),
            LabelParser(scores),
        ],
        scores=scores,
    )
    model_parser = load_model_parser(model_path, scores)
    if model_parser is not None:
        registry.register(model_parser)
    return registry


_default_registry: Optional[ParserRegistry] = None


def default_registry() -> ParserRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = build_default_registry()
    return _default_registry


def register_parser(parser: FieldParser) -> None:
    default_registry().register(parser)


def classify(context: FieldContext) -> List[CandidateType]:
    return default_registry().classify(context)
