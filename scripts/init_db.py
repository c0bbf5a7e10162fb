# scripts/init_db.py
import asyncio

from leaddocs.db import engine
from leaddocs.models import Base


async def main() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("OK: created lead tables (idempotent).")


if __name__ == "__main__":
    asyncio.run(main())
