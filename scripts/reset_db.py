import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.tables import metadata  # noqa: E402
from app.infrastructure.seed_data import seed_catalog  # noqa: E402


async def reset():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        for table in reversed(metadata.sorted_tables):
            print(f"Dropped {table.name}")

        await conn.run_sync(metadata.create_all)
        print("Recreated all tables.")

        await seed_catalog(conn)
        print("Seeded demo rooms and services.")

if __name__ == "__main__":
    asyncio.run(reset())
