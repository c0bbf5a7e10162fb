from __future__ import annotations

from enum import Enum

# Bump when a member is added, renamed or removed; the association table is versioned with it.
VOCABULARY_VERSION = 3


class CanonicalField(str, Enum):
    # --- Point of contact (person who filled the form) ---
    first_name_poc = "first_name_poc"
    last_name_poc = "last_name_poc"
    title_poc = "title_poc"
    email_poc = "email_poc"
    mobile_phone_poc = "mobile_phone_poc"
    linkedin_poc = "linkedin_poc"

    # --- Signer (authorized signatory) ---
    first_name_sign = "first_name_sign"
    last_name_sign = "last_name_sign"
    title_sign = "title_sign"
    email_sign = "email_sign"
    mobile_phone_sign = "mobile_phone_sign"
    linkedin_sign = "linkedin_sign"

    # --- Active identity (resolved from signer / poc) ---
    first_name = "first_name"
    last_name = "last_name"
    title = "title"
    email = "email"
    mobile_phone = "mobile_phone"
    linkedin = "linkedin"

    # --- Legacy contact fields ---
    contact_name = "contact_name"
    contact_email = "contact_email"
    authorized_signatory = "authorized_signatory"

    # --- Business ---
    business_legal_name = "business_legal_name"
    dba = "dba"
    ein = "ein"
    entity_type = "entity_type"
    state_incorporation = "state_incorporation"
    date_incorporation = "date_incorporation"
    fiscal_year_end = "fiscal_year_end"
    website = "website"
    business_description = "business_description"
    phone_issuer = "phone_issuer"

    # --- Business address ---
    address_issuer = "address_issuer"
    city_issuer = "city_issuer"
    state_issuer = "state_issuer"
    zip_issuer = "zip_issuer"
    full_address_issuer = "full_address_issuer"

    # --- Project ---
    tech = "tech"
    other_tech = "other_tech"
    project_name = "project_name"
    project_type = "project_type"
    project_description = "project_description"
    name_plate_capacity = "name_plate_capacity"
    address_project = "address_project"
    city_project = "city_project"
    state_project = "state_project"
    zip_project = "zip_project"
    full_address_project = "full_address_project"

    # --- Raise ---
    target_issuer = "target_issuer"
    maximum_issuer = "maximum_issuer"
    deadline = "deadline"
    use_of_funds = "use_of_funds"
    funding_amount = "funding_amount"
    loan_amount = "loan_amount"
    total_project_cost = "total_project_cost"

    # --- Financing ---
    financing_option = "financing_option"
    financing_other = "financing_other"
    financing_requirements = "financing_requirements"
    interest_rate = "interest_rate"
    term_months = "term_months"
    term_length = "term_length"
    ltv_ratio = "ltv_ratio"

    # --- Smart defaults: technical ---
    capture_technology = "capture_technology"
    capture_technology_details = "capture_technology_details"
    energy_performance = "energy_performance"
    equipment_eligibility = "equipment_eligibility"
    monitoring_system = "monitoring_system"
    storage_location = "storage_location"
    storage_method = "storage_method"
    technology_risk = "technology_risk"
    water_efficiency = "water_efficiency"

    # --- Smart defaults: legal ---
    collateral_description = "collateral_description"
    development_rights = "development_rights"
    exit_mechanisms = "exit_mechanisms"
    exit_strategy = "exit_strategy"
    financial_covenants = "financial_covenants"
    permitting_risk = "permitting_risk"
    personal_guarantees = "personal_guarantees"

    # --- Smart defaults: risk ---
    contingency_reserve = "contingency_reserve"
    development_risk = "development_risk"
    market_risk = "market_risk"

    # --- Smart defaults: environmental ---
    certification_level = "certification_level"
    certification_target = "certification_target"
    environmental_impact = "environmental_impact"
    indoor_quality = "indoor_quality"
    sustainable_materials = "sustainable_materials"
    waste_reduction = "waste_reduction"
    water_features = "water_features"

    # --- Calculated ---
    milestone_structure = "milestone_structure"
    ppa_details = "ppa_details"
    ar_eligibility = "ar_eligibility"
    inventory_eligibility = "inventory_eligibility"
    renewal_options = "renewal_options"
    reporting_requirements = "reporting_requirements"
    financing_structure = "financing_structure"
    total_interest = "total_interest"
    verification_protocol = "verification_protocol"
    term_sheet_content = "term_sheet_content"

    # --- System ---
    form_id = "form_id"
    submission_time = "submission_time"
    phase_one_submission = "phase_one_submission"
    phase_two_submission = "phase_two_submission"
    submission_date = "submission_date"
    filing_date = "filing_date"
    current_date = "current_date"
    current_time = "current_time"
    calendar_link = "calendar_link"


CANONICAL_NAMES: frozenset[str] = frozenset(f.value for f in CanonicalField)


def is_canonical(name: str) -> bool:
    return name in CANONICAL_NAMES
