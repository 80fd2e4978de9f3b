import argparse
import asyncio
from sqlalchemy.ext.asyncio import AsyncEngine
from src.database import engine, Base

# Import all models to ensure they are registered in Base.metadata
from src.clients.models import Client, ClientDetails

async def init_models(target: AsyncEngine = engine, reset: bool = False) -> None:
    """Create the clients tables, dropping them first when ``reset`` is set."""
    async with target.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

def main() -> None:
    parser = argparse.ArgumentParser(description="Create the client registry tables.")
    parser.add_argument("--reset", action="store_true", help="drop clients and clients_details first")
    args = parser.parse_args()
    asyncio.run(init_models(reset=args.reset))
    print("Database tables recreated." if args.reset else "Database tables created.")

if __name__ == "__main__":
    main()
