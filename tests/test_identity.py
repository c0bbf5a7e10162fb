import pytest

from leaddocs.domain.identity import IdentityDefaults, resolve_identity
from leaddocs.errors import IntakeValidationError


def test_signer_beats_point_of_contact():
    out = resolve_identity(
        {"first_name_sign": "Grace", "first_name_poc": "Ada", "last_name_poc": "Lovelace", "email_poc": "a@x.io"}
    )
    assert out["first_name"] == "Grace"
    assert out["last_name"] == "Lovelace"
    assert out["email"] == "a@x.io"


def test_legacy_contact_email_is_last_resort():
    out = resolve_identity({"first_name": "Ada", "last_name": "L", "contact_email": "legacy@x.io"})
    assert out["email"] == "legacy@x.io"


def test_lenient_mode_fills_stand_ins():
    out = resolve_identity({}, defaults=IdentityDefaults("Pat", "Doe", "pat@example.com"))
    assert (out["first_name"], out["last_name"], out["email"]) == ("Pat", "Doe", "pat@example.com")
    assert out["title"] == ""


def test_strict_mode_rejects_missing_identity():
    with pytest.raises(IntakeValidationError) as ei:
        resolve_identity({"first_name_poc": "Ada"}, strict=True)
    assert ei.value.field == "last_name"
