"""Seed the deduction and benefit catalogs.

Run with:
    python -m sweldox_payroll.seed

Payroll generation fails for every employee until all mandatory deduction
codes exist, so a fresh database needs this before the first run.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sweldox_payroll.calculators.types import DeductionCode
from sweldox_payroll.database import create_schema, dispose_db, get_session
from sweldox_payroll.models import BenefitType, DeductionType

logger = logging.getLogger(__name__)

DEDUCTION_DESCRIPTIONS: dict[DeductionCode, str] = {
    DeductionCode.SSS: "Social Security System",
    DeductionCode.PHIC: "PhilHealth",
    DeductionCode.HDMF: "Pag-IBIG Fund",
    DeductionCode.TAX: "Withholding Tax",
}

BENEFIT_DESCRIPTIONS: tuple[str, ...] = (
    "Rice Subsidy",
    "Phone Allowance",
    "Clothing Allowance",
)


async def seed_deduction_types(session: AsyncSession) -> list[str]:
    """Add missing mandatory deduction codes. Returns the codes created."""
    result = await session.execute(select(DeductionType.code))
    existing = set(result.scalars().all())

    created = []
    for code, description in DEDUCTION_DESCRIPTIONS.items():
        if code.value in existing:
            continue
        session.add(DeductionType(code=code.value, description=description))
        created.append(code.value)

    await session.flush()
    if created:
        logger.info("Created deduction types: %s", ", ".join(created))
    return created


async def seed_benefit_types(session: AsyncSession) -> list[str]:
    """Add missing default benefit types. Returns the descriptions created."""
    result = await session.execute(select(BenefitType.description))
    existing = set(result.scalars().all())

    created = [d for d in BENEFIT_DESCRIPTIONS if d not in existing]
    session.add_all(BenefitType(description=d) for d in created)

    await session.flush()
    if created:
        logger.info("Created benefit types: %s", ", ".join(created))
    return created


async def main() -> None:
    """Create tables and seed catalogs."""
    print("Seeding payroll catalogs...")

    await create_schema()
    async with get_session() as session:
        deductions = await seed_deduction_types(session)
        benefits = await seed_benefit_types(session)
        await session.commit()
    await dispose_db()

    print(f"\nDone! {len(deductions)} deduction type(s), {len(benefits)} benefit type(s) added.")


if __name__ == "__main__":
    asyncio.run(main())
