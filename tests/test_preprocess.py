import pytest

from ml import preprocess


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("First Name *", "first name"),
        ("firstName", "first name"),
        ("applicant[email_address]", "applicant email address"),
        ("  Are you authorized to work?  ", "are you authorized to work"),
        ("手机号码：", "手机号码"),
        ("", ""),
        (None, ""),
    ],
)
def test_clean_label(raw, expected):
    """
    clean_label() should:
    - split camelCase
    - lowercase everything
    - turn punctuation into spaces and collapse them
    - keep stopwords ("are you ... to") and CJK text
    """
    assert preprocess.clean_label(raw) == expected


def test_load_label_dataset(tmp_path):
    """
    Labels get cleaned, types get uppercased, and rows that become
    duplicates (or empty) after cleaning are dropped.
    """
    csv = tmp_path / "labels.csv"
    csv.write_text(
        "label_text,field_type\n"
        "First Name,first_name\n"
        "first name *,FIRST_NAME\n"
        "Email Address,EMAIL\n"
        "***,PHONE\n"
        ",CITY\n",
        encoding="utf-8",
    )

    data = preprocess.load_label_dataset(csv)

    assert list(data["label_text"]) == ["first name", "email address"]
    assert list(data["field_type"]) == ["FIRST_NAME", "EMAIL"]


def test_shipped_dataset_is_usable():
    from models.train_form_model import DEFAULT_CSV, load_training_data

    data = load_training_data(DEFAULT_CSV)

    assert len(data) > 100
    assert data["label_text"].str.len().min() > 0
    assert "UNKNOWN" in set(data["field_type"])
