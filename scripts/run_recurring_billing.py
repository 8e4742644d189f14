# scripts/run_recurring_billing.py
# Uso: python -m scripts.run_recurring_billing [--today YYYY-MM-DD]
import sys, asyncio
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import argparse
from datetime import date

from portal.core.logging import configure_logging
from portal.db.base import Base
from portal.db.session import AsyncSessionLocal, engine
from portal.services.recurring_billing import run_recurring_billing

import portal.modules.companies.models  # noqa: F401
import portal.modules.payments.models  # noqa: F401


async def main(today: date | None, create_tables: bool) -> None:
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        summary = await run_recurring_billing(db, today=today)

    print(f"created={summary.created} skipped={summary.skipped}")
    for w in summary.warnings:
        print(f"warning: {w}")
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Gera as cobranças recorrentes pendentes.")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    parser.add_argument("--create-tables", action="store_true", help="cria o schema antes (dev)")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(main(args.today, args.create_tables))
