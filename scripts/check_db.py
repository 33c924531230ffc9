import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.tables import metadata  # noqa: E402


async def check():
    async with engine.connect() as conn:
        for table in metadata.sorted_tables:
            try:
                res = await conn.execute(select(func.count()).select_from(table))
                print(f"{table.name}: {res.scalar()} rows")
            except SQLAlchemyError as e:
                print(f"{table.name}: Error {e}")

if __name__ == "__main__":
    asyncio.run(check())
