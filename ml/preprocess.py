import re

import pandas as pd

# Keep latin letters, digits and CJK ideographs; everything else becomes a space.
_NON_WORD = re.compile(r"[^a-z0-9一-龥\s]")
_CAMEL = re.compile(r"([a-z0-9])([A-Z])")


def clean_label(text: str) -> str:
    """
    Normalizes a form label (or a name attribute) before it goes to the model.
    Steps:
      1. Split camelCase ("firstName" -> "first Name")
      2. Lowercase
      3. Replace punctuation, "*", "_" etc. with spaces
      4. Collapse whitespace
    Stopwords are kept: in labels like "Are you authorized to work"
    they carry meaning.
    """
    if not text:
        return ""
    text = _CAMEL.sub(r"\1 \2", str(text))
    text = text.lower()
    text = _NON_WORD.sub(" ", text.replace("_", " "))
    return " ".join(text.split())


def load_label_dataset(csv_path) -> pd.DataFrame:
    """
    Reads a label_text,field_type CSV, drops empty rows and cleans the label
    column. Duplicate (label, type) pairs after cleaning are removed.
    """
    data = pd.read_csv(csv_path)
    data = data.dropna(subset=["label_text", "field_type"]).copy()
    data["label_text"] = data["label_text"].astype(str).map(clean_label)
    data["field_type"] = data["field_type"].astype(str).str.strip().str.upper()
    data = data[data["label_text"] != ""]
    return data.drop_duplicates(subset=["label_text", "field_type"]).reset_index(drop=True)


if __name__ == "__main__":
    import sys
    from pathlib import Path

    csv = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).resolve().parents[1] / "dataset" / "form_labels.csv"
    frame = load_label_dataset(csv)
    print(frame["field_type"].value_counts().to_string())
    print(f"{len(frame)} cleaned rows from {csv}")
