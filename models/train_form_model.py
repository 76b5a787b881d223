# train_form_model.py
# Trains the optional label -> Taxonomy model used by autofill's ModelParser.
#   python -m models.train_form_model [csv] [out.pkl]
import sys
from pathlib import Path

import joblib
import pandas as pd
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import classification_report
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline

from autofill.types import Taxonomy
from ml.preprocess import load_label_dataset

# Point to the repo root (one level up from /models)
REPO = Path(__file__).resolve().parents[1]
DEFAULT_CSV = REPO / "dataset" / "form_labels.csv"
DEFAULT_OUT = REPO / "models" / "form_model.pkl"


def build_pipeline() -> Pipeline:
    # Char-level TF-IDF handles typos/case/punctuation in tiny labels well
    return Pipeline(
        steps=[
            ("tfidf", TfidfVectorizer(
                lowercase=True,
                strip_accents="unicode",
                analyzer="char_wb",  # word-boundary char n-grams suit short labels
                ngram_range=(2, 5),
                min_df=1,
                sublinear_tf=True,
            )),
            ("clf", LogisticRegression(
                solver="lbfgs",
                max_iter=2000,
                C=2.0,
                class_weight="balanced",  # helps recall on under-represented classes
            )),
        ]
    )


def load_training_data(csv_path: Path) -> pd.DataFrame:
    data = load_label_dataset(csv_path)
    valid = {t.value for t in Taxonomy}
    unknown = sorted(set(data["field_type"]) - valid)
    if unknown:
        raise ValueError(f"{csv_path} has field_type values outside the taxonomy: {unknown}")
    return data


def train(csv_path: Path = DEFAULT_CSV, out_path: Path = DEFAULT_OUT, evaluate: bool = True) -> Pipeline:
    if not csv_path.exists():
        raise FileNotFoundError(f"Could not find {csv_path}")

    data = load_training_data(csv_path)
    X = data["label_text"]
    y = data["field_type"]

    model = build_pipeline()
    counts = y.value_counts()
    # stratified split needs 2+ rows per class and a test set with room for every class
    if evaluate and counts.min() >= 2 and int(len(data) * 0.20) >= counts.size:
        X_train, X_test, y_train, y_test = train_test_split(
            X, y, test_size=0.20, random_state=42, stratify=y
        )
        model.fit(X_train, y_train)
        y_pred = model.predict(X_test)
        print("=== Model Evaluation on Test Data ===")
        print(classification_report(y_test, y_pred, zero_division=0))

    # final model always sees every row
    model.fit(X, y)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, out_path)
    print(f"=== Model saved to {out_path} ===")
    return model


if __name__ == "__main__":
    csv_arg = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CSV
    out_arg = Path(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_OUT
    train(csv_arg, out_arg)
