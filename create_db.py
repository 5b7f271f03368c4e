# create_db.py
import asyncio

from config import DB_PATH
from database.database import make_engine, init_db


async def create() -> None:
    """Crée toutes les tables de la base (SQLite ou MySQL)."""
    engine = make_engine(DB_PATH)
    await init_db(engine)
    await engine.dispose()
    print("Base de données initialisée avec succès.")

if __name__ == "__main__":
    asyncio.run(create())
