# Smoke-test a trained label model.
#   python -m models.test_form_model [model.pkl]
import sys
from pathlib import Path

import joblib

from autofill.classifier.model_parser import ModelParser

MODEL_PATH = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).resolve().parent / "form_model.pkl"

SAMPLE_LABELS = [
    "First Name",
    "Last Name",
    "Email Address",
    "Phone Number",
    "City",
    "University",
    "Expected graduation date",
    "Are you legally authorized to work in the US?",
    "Will you now or in the future require sponsorship?",
    "Gender",
]


def main():
    parser = ModelParser(joblib.load(MODEL_PATH))
    print(f"\n=== Model loaded from {MODEL_PATH} ===\n")

    print("=== Sample Predictions ===")
    for label in SAMPLE_LABELS:
        pred, confidence = parser.predict(label)
        print(f"Label: '{label}' -> Predicted: '{pred}' (confidence: {confidence:.2f})")

    # Interactive loop
    while True:
        try:
            user_input = input("\nEnter a form label (or type 'quit' to exit): ")
        except EOFError:
            break
        if user_input.lower() == "quit":
            break
        pred, confidence = parser.predict(user_input)
        print(f"Predicted: '{pred}' (confidence: {confidence:.2f})")


if __name__ == "__main__":
    main()
