"""
Transformer dispatch.

transform_value() tries every registered transformer whose source/target
types include the requested types, in registration order, and returns the
first result from one that says it can handle the value. No applicable
transformer means the value passes through untouched.
"""

import logging
from typing import Iterable, List, Optional

from autofill.transformer.base import ValueTransformer
from autofill.transformer.booleans import BooleanTransformer
from autofill.transformer.dates import DateTransformer
from autofill.transformer.degrees import DegreeTransformer
from autofill.transformer.names import NameTransformer
from autofill.transformer.phone import PhoneTransformer
from autofill.types import FieldContext, Taxonomy

logger = logging.getLogger(__name__)


class TransformerRegistry:
    def __init__(self, transformers: Iterable[ValueTransformer] = ()):
        self._transformers: List[ValueTransformer] = list(transformers)

    def register(self, transformer: ValueTransformer) -> None:
        self._transformers.append(transformer)

    @property
    def transformers(self) -> List[ValueTransformer]:
        return list(self._transformers)

    def transform_value(
        self,
        value: str,
        source_type: Taxonomy,
        target: FieldContext,
        target_type: Optional[Taxonomy] = None,
    ) -> str:
        wanted = [source_type] if target_type is None else [source_type, target_type]
        for transformer in self._transformers:
            if not transformer.handles(wanted):
                continue
            if transformer.can_transform(value, target):
                out = transformer.transform(value, target)
                logger.debug("%s: %r -> %r", transformer.name, value, out)
                return out
        return value


def build_default_registry() -> TransformerRegistry:
    return TransformerRegistry(
        [
            NameTransformer(),
            DateTransformer(),
            PhoneTransformer(),
            BooleanTransformer(),
            DegreeTransformer(),
        ]
    )


_default_registry = build_default_registry()


def register_transformer(transformer: ValueTransformer) -> None:
    _default_registry.register(transformer)


def transform_value(
    value: str,
    source_type: Taxonomy,
    target: FieldContext,
    target_type: Optional[Taxonomy] = None,
) -> str:
    return _default_registry.transform_value(value, source_type, target, target_type)
