# scripts/smoke_phase_one.py
import asyncio
import json
import os

from leaddocs.config import settings
from leaddocs.service_layer.bootstrap import memory_workspace
from leaddocs.service_layer.use_cases.phase_one import run_phase_one


SAMPLE = {
    "Business Legal Name": os.environ.get("BUSINESS", "Sunrise Solar LLC"),
    "First Name (POC)": "Ada",
    "Last Name (POC)": "Lovelace",
    "Email (POC)": "ada@example.com",
    "Business Address": "123 Main St\nDetroit, Michigan 48226",
    "Financing Option": os.environ.get("FINANCING", "Bridge Loan"),
    "Tech": "Solar",
    "Loan Amount": "250000",
}


async def main():
    ws = memory_workspace()
    ws.docs.templates[settings.TEMPLATE_MNDA_ID] = "MNDA between {{business_legal_name}} and [First Name] [Last Name]"
    res = await run_phase_one(ws, SAMPLE, use_previous=False)
    print(json.dumps(res.to_dict(), indent=2))
    mnda = res.documents.succeeded[0]
    print(ws.docs.text_of(mnda.id))


if __name__ == "__main__":
    asyncio.run(main())
