# database/database.py
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import AsyncAdaptedQueuePool

# 1. Créer Base tout de suite
Base = declarative_base()


# 2. Construire l’engine (pool borné, injecté partout, jamais global)
def make_engine(url: str, pool_size: int = 100, pool_timeout: float = 30) -> AsyncEngine:
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":")):
        # base en mémoire = une seule connexion partagée, pas de pool
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        echo=False,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=not url.startswith("sqlite"),
    )


# 3. Importer les modèles APRÈS (ils verront déjà Base)
from database import user, authkey, post, post_like   # noqa: E402,F401


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
