from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

Base = declarative_base()

# Async engine and session factory
async def get_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    # pre-ping drops connections the server closed while the pool sat idle
    return create_async_engine(database_url, pool_pre_ping=True, echo=echo)

async def get_session_factory(engine: AsyncEngine):
    # objects stay readable after commit; routes serialize them afterwards
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autocommit=False, autoflush=False
    )
