from __future__ import annotations

from typing import Mapping

from .parsing import to_float

TECHNICAL_DEFAULTS: dict[str, dict[str, str]] = {
    "solar": {
        "capture_technology": "N/A - Solar Project",
        "capture_technology_details": "N/A - Solar Project",
        "energy_performance": "High-efficiency photovoltaic panels with 20+ year performance warranty",
        "equipment_eligibility": "Tier 1 solar panels, certified inverters, and mounting systems",
        "monitoring_system": "Real-time energy production monitoring with SCADA integration",
        "storage_location": "On-site battery storage system (if applicable)",
        "storage_method": "Lithium-ion battery storage with grid-tie capability",
        "technology_risk": "Low - Proven solar PV technology with established track record",
        "water_efficiency": "Minimal water usage for panel cleaning and maintenance",
    },
    "carbon_capture": {
        "capture_technology": "Direct Air Capture (DAC) with chemical absorption",
        "capture_technology_details": "Amine-based CO2 capture with heat recovery systems",
        "energy_performance": "Energy-optimized capture process with renewable energy integration",
        "equipment_eligibility": "Industrial-grade capture equipment with verification systems",
        "monitoring_system": "Continuous CO2 measurement and verification protocols",
        "storage_location": "Deep geological formations or permanent sequestration sites",
        "storage_method": "Underground geological storage in depleted oil/gas reservoirs",
        "technology_risk": "Medium - Emerging technology with demonstrated pilot projects",
        "water_efficiency": "Closed-loop water system with minimal freshwater consumption",
    },
    "construction": {
        "capture_technology": "N/A - Construction Project",
        "capture_technology_details": "N/A - Construction Project",
        "energy_performance": "ENERGY STAR certified systems with smart building controls",
        "equipment_eligibility": "Sustainable building materials and energy-efficient systems",
        "monitoring_system": "Building management system with energy monitoring",
        "storage_location": "N/A - Construction Project",
        "storage_method": "N/A - Construction Project",
        "technology_risk": "Low - Proven sustainable construction technologies",
        "water_efficiency": "Low-flow fixtures and greywater recycling systems",
    },
}

LEGAL_DEFAULTS: dict[str, str] = {
    "collateral_description": "Project assets, equipment, and future receivables",
    "development_rights": "Exclusive development rights within defined project area",
    "exit_mechanisms": "Sale to strategic buyer, refinancing, or project completion",
    "exit_strategy": "Project completion and asset transfer or long-term operation",
    "financial_covenants": "Maintain minimum debt service coverage ratio of 1.25x",
    "permitting_risk": "Shared risk with mitigation strategies and contingency planning",
    "personal_guarantees": "Limited personal guarantees from project sponsors",
}

RISK_DEFAULTS: dict[str, str] = {
    "contingency_reserve": "10% of total project cost for unforeseen circumstances",
    "development_risk": "Mitigated through experienced development team and proven processes",
    "market_risk": "Reduced through long-term contracts and diversified revenue streams",
}

ENVIRONMENTAL_DEFAULTS: dict[str, dict[str, str]] = {
    "solar": {
        "certification_level": "LEED Gold equivalent for solar installations",
        "certification_target": "NABCEP certified installation and commissioning",
        "environmental_impact": "Significant reduction in carbon emissions and air pollution",
        "indoor_quality": "N/A - Outdoor solar installation",
        "sustainable_materials": "Recycled aluminum framing and sustainable mounting systems",
        "waste_reduction": "Minimal construction waste with recycling protocols",
        "water_features": "Minimal water usage for cleaning and maintenance",
    },
    "construction": {
        "certification_level": "LEED Gold or BREEAM Excellent rating",
        "certification_target": "LEED Gold certification",
        "environmental_impact": "Reduced energy consumption and carbon footprint",
        "indoor_quality": "Enhanced air quality with low-VOC materials",
        "sustainable_materials": "Locally sourced, recycled, and renewable materials",
        "waste_reduction": "Construction waste diversion target of 90%",
        "water_features": "Rainwater harvesting and greywater recycling systems",
    },
}

USE_OF_FUNDS: dict[str, str] = {
    "solar": "Equipment procurement (60%), installation costs (25%), development expenses (10%), contingency (5%)",
    "construction": "Construction costs (70%), materials (20%), permits and fees (5%), contingency (5%)",
    "carbon_capture": "Equipment and technology (65%), installation (20%), development (10%), contingency (5%)",
    "bridge": "Property acquisition, interim financing, development costs",
    "working_capital": "Inventory, accounts receivable financing, operational expenses",
    "predevelopment": "Site studies, permitting, engineering, legal and professional fees",
}


def technology_category(*hints: str | None) -> str | None:
    """solar | carbon_capture | construction, from tech / project type / financing text."""
    for hint in hints:
        s = (hint or "").lower()
        if "solar" in s or "photovoltaic" in s:
            return "solar"
        if "carbon" in s or "ccs" in s:
            return "carbon_capture"
        if "construction" in s or "building" in s:
            return "construction"
    return None


def _bracket_upper(field: str) -> str:
    return f"[{field.replace('_', ' ').upper()}]"


def smart_defaults(category: str | None) -> dict[str, str]:
    out: dict[str, str] = {}
    technical = TECHNICAL_DEFAULTS.get(category or "", {})
    for field in TECHNICAL_DEFAULTS["solar"]:
        out[field] = technical.get(field) or _bracket_upper(field)
    out.update(LEGAL_DEFAULTS)
    out.update(RISK_DEFAULTS)
    environmental = ENVIRONMENTAL_DEFAULTS.get(category or "") or ENVIRONMENTAL_DEFAULTS["construction"]
    out.update(environmental)
    return out


def total_interest(values: Mapping[str, str]) -> str:
    principal = to_float(values.get("loan_amount"))
    rate = to_float(values.get("interest_rate"))
    term = to_float(values.get("term_length") or values.get("term_months"))
    if principal is None or rate is None or term is None:
        return "[Total Interest - Requires loan amount, rate, and term]"
    return f"${principal * (rate / 100) * (term / 12):,.2f}"


def calculated_fields(values: Mapping[str, str], category: str | None, financing_slug: str) -> dict[str, str]:
    kind = category or financing_slug

    if kind == "solar":
        milestone = "25% at contract signing, 25% at permitting, 25% at installation start, 25% at commissioning"
        ppa = "20-year Power Purchase Agreement with annual escalation of 2.5%"
        verification = "Energy production verification through utility-grade metering systems"
    elif kind == "construction":
        milestone = "20% at design completion, 30% at foundation, 30% at substantial completion, 20% at final inspection"
        ppa = "Long-term offtake agreement with creditworthy counterparty"
        verification = "Independent third-party verification and monitoring protocols"
    elif kind == "carbon_capture":
        milestone = "Milestone-based payments tied to project development phases"
        ppa = "Long-term offtake agreement with creditworthy counterparty"
        verification = "Third-party verification following Verified Carbon Standard (VCS) protocols"
    else:
        milestone = "Milestone-based payments tied to project development phases"
        ppa = "Long-term offtake agreement with creditworthy counterparty"
        verification = "Independent third-party verification and monitoring protocols"

    if values.get("loan_amount") or values.get("funding_amount"):
        structure = f"Senior debt financing with {(values.get('ltv_ratio') or '80').rstrip('%')}% loan-to-value ratio"
    else:
        structure = "Equity and development capital with milestone-based funding"

    return {
        "milestone_structure": milestone,
        "ppa_details": ppa,
        "ar_eligibility": "80% of qualifying receivables under 90 days",
        "inventory_eligibility": "Finished goods inventory only",
        "renewal_options": "Annual renewal subject to review",
        "reporting_requirements": "Monthly financial statements, quarterly compliance reports, annual audited financials",
        "financing_structure": structure,
        "total_interest": total_interest(values),
        "use_of_funds": USE_OF_FUNDS.get(category or "") or USE_OF_FUNDS.get(financing_slug)
        or "Project development and operational expenses",
        "verification_protocol": verification,
    }
