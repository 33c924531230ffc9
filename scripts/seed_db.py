import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import func, select  # noqa: E402

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.tables import metadata, rooms  # noqa: E402
from app.infrastructure.seed_data import DEMO_ROOMS, DEMO_SERVICES, seed_catalog  # noqa: E402


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("Created missing tables.")

        existing = (await conn.execute(select(func.count()).select_from(rooms))).scalar()
        if existing:
            print(f"Catalog already has {existing} rooms, skipping seed.")
            return

        await seed_catalog(conn)
        print(f"Seeded {len(DEMO_ROOMS)} rooms and {len(DEMO_SERVICES)} services.")

if __name__ == "__main__":
    asyncio.run(seed())
