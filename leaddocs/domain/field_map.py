from __future__ import annotations

import re

from .vocabulary import VOCABULARY_VERSION, CanonicalField as F

FIELD_MAP_VERSION = VOCABULARY_VERSION

_NUMERIC_PAREN = re.compile(r"\s*\(\s*\d+\s*\)")
_NON_WORD = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")


def label_key(label: str) -> str:
    """
    Slug a question label the way the association table spells it.

    "Zip / Postal Code" -> "zip_postal_code", "Phone (1)" -> "phone".
    Already-slugged keys pass through unchanged, so older exports spelled
    "zip__postal_code" still hit their own table entry.
    """
    s = str(label).strip().lower()
    s = _NUMERIC_PAREN.sub("", s)
    s = _NON_WORD.sub("", s)
    s = _SPACES.sub("_", s.strip())
    return s


# Ordered (raw label slug, canonical field). When several non-empty aliases land on the
# same canonical field, the one listed LAST wins. Typos are real form labels; keep them.
FIELD_MAP: tuple[tuple[str, F], ...] = (
    # --- point of contact ---
    ("first_name_poc", F.first_name_poc),
    ("last_name_poc", F.last_name_poc),
    ("title_poc", F.title_poc),
    ("phone_poc", F.mobile_phone_poc),
    ("mobile_phone_poc", F.mobile_phone_poc),
    ("email_poc", F.email_poc),
    ("linkedin_profile", F.linkedin_poc),
    ("linkedin_poc", F.linkedin_poc),
    # --- signer ---
    ("first_name", F.first_name_sign),
    ("first_name_1", F.first_name_sign),
    ("first_name_sign", F.first_name_sign),
    ("last_name", F.last_name_sign),
    ("last_name_1", F.last_name_sign),
    ("last_name_sign", F.last_name_sign),
    ("title", F.title_sign),
    ("title_sign", F.title_sign),
    ("email", F.email_sign),
    ("email_sign", F.email_sign),
    ("phone_number", F.mobile_phone_sign),
    ("mobile_phone", F.mobile_phone_sign),
    ("mobile_phone_sign", F.mobile_phone_sign),
    ("linkedin", F.linkedin_sign),
    ("linkedin_sign", F.linkedin_sign),
    # --- legacy contact ---
    ("name", F.contact_name),
    ("full_name", F.contact_name),
    ("email", F.contact_email),
    ("email_address", F.contact_email),
    # --- business ---
    ("business_name", F.business_legal_name),
    ("company_name", F.business_legal_name),
    ("legal_name", F.business_legal_name),
    ("legal_business_name", F.business_legal_name),
    ("business_legal_name", F.business_legal_name),
    ("dba_doing_buisness_as", F.dba),
    ("dba_doing_business_as", F.dba),
    ("doing_business_as", F.dba),
    ("type_of_entity", F.entity_type),
    ("entity_type", F.entity_type),
    ("state_of_incorporation", F.state_incorporation),
    ("incorporation_date", F.date_incorporation),
    ("date_of_incorporation", F.date_incorporation),
    ("ein_number", F.ein),
    ("ein", F.ein),
    ("fiscal_year_end", F.fiscal_year_end),
    ("company_website", F.website),
    ("website", F.website),
    ("describe_your_business", F.business_description),
    ("business_description", F.business_description),
    ("business_phone", F.phone_issuer),
    # --- business address ---
    ("address", F.address_issuer),
    ("business_address", F.address_issuer),
    ("city", F.city_issuer),
    ("state", F.state_issuer),
    ("state_province", F.state_issuer),
    ("state__province", F.state_issuer),
    ("zip", F.zip_issuer),
    ("zip_postal_code", F.zip_issuer),
    ("zip__postal_code", F.zip_issuer),
    # --- project ---
    ("what_technology_are_you_raising_capital_for", F.tech),
    ("technology", F.tech),
    ("please_specify_your_technology", F.other_tech),
    ("project_or_portfolio_name", F.project_name),
    ("project", F.project_type),
    ("project_category", F.project_type),
    ("project_address", F.address_project),
    ("project_location", F.address_project),
    ("project_size", F.name_plate_capacity),
    ("nameplate_capacity", F.name_plate_capacity),
    ("project_description", F.project_description),
    ("describe_the_project", F.project_description),
    # --- raise ---
    ("minimum_capital_needed", F.target_issuer),
    ("target_amount", F.target_issuer),
    ("target_offering_amount", F.target_issuer),
    ("maximum_capital_needed", F.maximum_issuer),
    ("maximum_amount", F.maximum_issuer),
    ("maximum_offering_amount", F.maximum_issuer),
    ("by_when_do_you_need_the_capital", F.deadline),
    ("deadline_offering", F.deadline),
    ("describe_the_use_of_funds", F.use_of_funds),
    # --- financing ---
    ("which_of_the_options_above_is_a_better_fit_for_your_project", F.financing_option),
    ("financing_type", F.financing_option),
    ("if_other_please_specify", F.financing_other),
    ("other_financing", F.financing_other),
    ("do_you_have_any_preferred_terms_or_requirements", F.financing_requirements),
    ("preferred_terms", F.financing_requirements),
    ("desired_rate", F.interest_rate),
    ("rate", F.interest_rate),
    ("desired_term", F.term_months),
    ("term", F.term_months),
    # --- system ---
    ("submission_id", F.form_id),
    ("submission_date", F.phase_one_submission),
)

# Labels that carry an uploaded file, keyed to the phase-two folder that stores them.
UPLOAD_FIELDS: dict[str, str] = {
    "articles_of_incorporation": "Escrow Account",
    "certificate_of_formation": "Escrow Account",
    "ein_documentation": "Escrow Account",
    "cap_table": "Escrow Account",
    "investor_rights_schedule": "Escrow Account",
    "governing_documents": "Escrow Account",
    "financial_statements": "Financial Statements",
    "audited_financials": "Financial Statements",
    "reviewed_financials": "Financial Statements",
    "project_pictures": "Content",
    "team_headshots": "Content",
}
