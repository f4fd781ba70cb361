from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from busbook.config import settings


DATABASE_URL = str(settings.DATABASE_URL)

# one engine (and pool) per process; disposed by the app lifespan
engine = create_async_engine(DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)

# session factory
async_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:  # to be used as dependency
    async with async_session() as session:
        yield session


async def dispose_engine():
    await engine.dispose()
