from leaddocs.domain.field_map import label_key
from leaddocs.domain.normalizer import normalize_fields
from leaddocs.domain.parsing import as_text, is_empty, to_float


def test_label_key_slugs_form_labels():
    assert label_key("Zip / Postal Code") == "zip_postal_code"
    assert label_key("First Name (1)") == "first_name"
    assert label_key("First Name (POC)") == "first_name_poc"
    assert label_key("zip__postal_code") == "zip__postal_code"


def test_aliases_map_to_canonical_fields():
    out = normalize_fields(
        {
            "First Name (POC)": "Ada",
            "First Name (1)": "Grace",
            "DBA (Doing Buisness As)": "Sunny",
            "Zip / Postal Code": "48226",
        }
    )
    assert out["first_name_poc"] == "Ada"
    assert out["first_name_sign"] == "Grace"
    assert out["dba"] == "Sunny"
    assert out["zip_issuer"] == "48226"


def test_last_non_empty_alias_wins_and_empty_never_clobbers():
    assert normalize_fields({"Business Name": "A", "Legal Name": "B"})["business_legal_name"] == "B"
    assert normalize_fields({"Business Name": "A", "Legal Name": ""})["business_legal_name"] == "A"
    assert normalize_fields({"Business Name": "", "Legal Name": "null"})["business_legal_name"] == ""


def test_canonical_keys_pass_through_last():
    out = normalize_fields({"Company Name": "D", "business_legal_name": "C", "loan_amount": 250000.0})
    assert out["business_legal_name"] == "C"
    assert out["loan_amount"] == "250000"


def test_email_feeds_signer_and_legacy_contact():
    out = normalize_fields({"Email": "sig@example.com"})
    assert out["email_sign"] == "sig@example.com"
    assert out["contact_email"] == "sig@example.com"


def test_file_answers_and_unknown_labels_are_dropped():
    out = normalize_fields(
        {
            "Financial Statements": [{"url": "https://files.example/a.pdf", "filename": "a.pdf"}],
            "Favourite Colour": "blue",
        }
    )
    assert out == {}


def test_parsing_helpers():
    assert is_empty("  Unanswered ")
    assert is_empty(["", None])
    assert as_text(["a", "", "b"]) == "a, b"
    assert as_text(True) == "Yes"
    assert as_text(12.0) == "12"
    assert to_float("$1,250,000") == 1250000.0
    assert to_float("7.5%") == 7.5
    assert to_float("n/a") is None
