from __future__ import annotations

import re
from typing import Mapping

from .replacements import placeholder_for

# Body text injected into the {{term_sheet_content}} slot of a term sheet document.
TERM_SHEETS: dict[str, str] = {
    "solar": """
SOLAR PROJECT TERM SHEET

Project Type: Solar Energy Development
Project: {{project_name}} ({{name_plate_capacity}})
Location: {{full_address_project}}

Key Terms:
- Technology: Photovoltaic Solar Panels
- Power Purchase Agreement: {{ppa_details}}
- Environmental Impact: {{environmental_impact}}
- Financing Structure: {{financing_structure}}
- Monitoring: {{monitoring_system}}

Risk Factors:
- Weather and seasonal variations
- Regulatory changes
- Grid interconnection challenges
- Technology risk: {{technology_risk}}
""",
    "carbon_capture": """
CARBON CAPTURE PROJECT TERM SHEET

Project Type: Carbon Capture and Storage
Technology: {{capture_technology}}
Storage Method: {{storage_method}}

Key Terms:
- Capture Technology: {{capture_technology_details}}
- Storage Location: {{storage_location}}
- Monitoring System: {{monitoring_system}}
- Verification Protocol: {{verification_protocol}}

Risk Factors:
- Geological storage risks
- Technology performance: {{technology_risk}}
- Carbon credit market volatility
""",
    "construction": """
CONSTRUCTION PROJECT TERM SHEET

Project Type: Sustainable Construction Development
Green Certification Target: {{certification_target}}

Key Terms:
- Sustainable Materials: {{sustainable_materials}}
- Water Conservation Features: {{water_features}}
- Waste Reduction Plan: {{waste_reduction}}
- Milestone Payments: {{milestone_structure}}

Sustainability Features:
- Certification: {{certification_level}}
- Energy Performance: {{energy_performance}}
- Water Efficiency: {{water_efficiency}}
- Indoor Environmental Quality: {{indoor_quality}}

Financial Projections:
- Total Project Cost: {{total_project_cost}}
""",
    "bridge": """
BRIDGE FINANCING TERM SHEET

Financing Type: Bridge/Interim Financing
Loan Amount: {{loan_amount}}
Interest Rate: {{interest_rate}}
Term Length: {{term_months}} months

Key Terms:
- Loan-to-Value Ratio: {{ltv_ratio}}
- Collateral: {{collateral_description}}
- Personal Guarantees: {{personal_guarantees}}
- Exit Strategy: {{exit_strategy}}
- Total Interest Cost: {{total_interest}}
""",
    "working_capital": """
WORKING CAPITAL TERM SHEET

Financing Type: Working Capital Line of Credit
Interest Rate: {{interest_rate}} (Variable)
Term: {{term_months}} months

Key Terms:
- Collateral: {{collateral_description}}
- Financial Covenants: {{financial_covenants}}
- Reporting Requirements: {{reporting_requirements}}

Eligible Collateral:
- Accounts Receivable: {{ar_eligibility}}
- Inventory: {{inventory_eligibility}}
- Equipment: {{equipment_eligibility}}

Renewal Options: {{renewal_options}}
""",
    "predevelopment": """
PRE-DEVELOPMENT FINANCING TERM SHEET

Financing Type: Pre-Development Capital
Funding Amount: {{funding_amount}}

Key Terms:
- Use of Funds: {{use_of_funds}}
- Milestone Payments: {{milestone_structure}}
- Development Rights: {{development_rights}}
- Exit Mechanisms: {{exit_mechanisms}}

Risk Allocation:
- Development Risk: {{development_risk}}
- Permitting Risk: {{permitting_risk}}
- Market Risk: {{market_risk}}
- Technology Risk: {{technology_risk}}
- Contingency Reserve: {{contingency_reserve}}
""",
}

TYPE_ALIASES: dict[str, str] = {
    "solar": "solar",
    "solar_energy": "solar",
    "photovoltaic": "solar",
    "pv": "solar",
    "carbon_capture": "carbon_capture",
    "carbon_sequestration": "carbon_capture",
    "ccs": "carbon_capture",
    "construction": "construction",
    "building": "construction",
    "sustainable_construction": "construction",
    "green_building": "construction",
    "bridge": "bridge",
    "bridge_financing": "bridge",
    "interim_financing": "bridge",
    "working_capital": "working_capital",
    "working_capital_financing": "working_capital",
    "line_of_credit": "working_capital",
    "predevelopment": "predevelopment",
    "pre_development": "predevelopment",
    "development_capital": "predevelopment",
}

_PLACEHOLDER = re.compile(r"\{\{\s*([a-zA-Z0-9_]+)\s*\}\}")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def term_sheet_kind(project_type: str | None) -> str | None:
    if not project_type:
        return None
    key = _NON_ALNUM.sub("_", str(project_type).strip().lower())
    kind = TYPE_ALIASES.get(key, key)
    return kind if kind in TERM_SHEETS else None


def render_term_sheet(project_type: str | None, values: Mapping[str, str]) -> str:
    """Literal {{key}} substitution over the body for this project type."""
    if not project_type:
        return "[Term Sheet Content - Project Type Not Specified]"
    kind = term_sheet_kind(project_type)
    if kind is None:
        return f"[Term Sheet for {project_type} - Please customize this section with specific terms for this project type]"

    def _sub(m: re.Match[str]) -> str:
        v = values.get(m.group(1)) or ""
        return v if v else placeholder_for(m.group(1))

    return _PLACEHOLDER.sub(_sub, TERM_SHEETS[kind]).strip()
