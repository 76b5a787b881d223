"""
Label classifier backed by the scikit-learn model from models/train_form_model.py.

Only ever a corroborating signal: its score is capped at
Scores.model_ceiling, below every rule-based parser.
"""

import logging
import os
from typing import Optional

import joblib
import numpy as np

from autofill.classifier.parsers import FieldParser
from autofill.config import SCORES, Scores
from autofill.types import CandidateType, Taxonomy
from ml.preprocess import clean_label

logger = logging.getLogger(__name__)


class ModelParser(FieldParser):
    name = "model"
    priority = 60

    def __init__(self, model, scores: Scores = SCORES):
        self.model = model
        self.scores = scores

    def can_parse(self, context):
        return bool(clean_label(context.label_text))

    def predict(self, label_text: str):
        """(class name, probability) for the most likely class."""
        text = clean_label(label_text)
        if hasattr(self.model, "predict_proba"):
            probs = self.model.predict_proba([text])[0]
            idx = int(np.argmax(probs))
            return str(self.model.classes_[idx]), float(probs[idx])
        # no probabilities -> treat the prediction as certain
        return str(self.model.predict([text])[0]), 1.0

    def parse(self, context):
        predicted, probability = self.predict(context.label_text)
        if probability < self.scores.model_min_probability:
            return None
        try:
            taxonomy = Taxonomy(predicted.upper())
        except ValueError:
            logger.debug("model class %r is not a taxonomy value", predicted)
            return None
        if taxonomy is Taxonomy.UNKNOWN:
            return None
        score = round(self.scores.model_ceiling * probability, 4)
        return CandidateType(taxonomy, score, [f"model predicts {taxonomy.value} (p={probability:.2f})"])


def load_model_parser(path: Optional[str], scores: Scores = SCORES) -> Optional[ModelParser]:
    """ModelParser for the joblib file at `path`, or None if it is missing or unreadable."""
    if not path:
        return None
    if not os.path.exists(path):
        logger.warning("form model %s not found; label model disabled", path)
        return None
    try:
        model = joblib.load(path)
    except Exception as e:
        logger.warning("could not load form model %s: %s", path, e)
        return None
    logger.info("loaded form model from %s", path)
    return ModelParser(model, scores)
