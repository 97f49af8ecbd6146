"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sweldox_payroll.database import init_db
from sweldox_payroll.services.payroll_service import PayrollRunner


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_payroll_runner(db: DbSession) -> PayrollRunner:
    """Payroll runner bound to the request's session."""
    return PayrollRunner.for_session(db)


Runner = Annotated[PayrollRunner, Depends(get_payroll_runner)]
