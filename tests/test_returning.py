from leaddocs.adapters.memory import InMemorySheets
from leaddocs.service_layer.returning import find_previous_submission

HEADER = ["Email (POC)", "First Name (POC)", "Business Legal Name", "EIN", "Submission Time"]


def _sheets():
    sheets = InMemorySheets()
    sheets.rows("prev", "Sheet1").extend(
        [
            HEADER,
            ["ada@example.com", "Ada", "Old Co", "11-111", "2024-01-01T00:00:00"],
            ["ADA@example.com", "Ada", "Old Co", "22-222", "2025-01-01T00:00:00Z"],
            ["bob@example.com", "Bob", "Bob Co", "33-333", "2025-06-01T00:00:00"],
        ]
    )
    return sheets


async def test_newest_match_by_email_wins():
    found = await find_previous_submission(_sheets(), "prev", "Sheet1", email="Ada@Example.com")
    assert found["EIN"] == "22-222"
    assert found["Business Legal Name"] == "Old Co"


async def test_first_name_is_the_fallback_key():
    found = await find_previous_submission(_sheets(), "prev", "Sheet1", first_name="bob")
    assert found["EIN"] == "33-333"


async def test_no_match_or_no_key_or_failure_means_new_customer():
    sheets = _sheets()
    assert await find_previous_submission(sheets, "prev", "Sheet1", email="zed@example.com") is None
    assert await find_previous_submission(sheets, "prev", "Sheet1") is None
    sheets.fail_operations.add("sheets.read_rows")
    assert await find_previous_submission(sheets, "prev", "Sheet1", email="ada@example.com") is None
