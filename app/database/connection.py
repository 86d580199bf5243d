from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from app.config import settings


def get_database_url():
    """Parse database URL and convert to asyncpg-compatible format"""
    original_url = make_url(settings.DATABASE_URL.strip().strip("'\""))
    if original_url.get_backend_name() != "postgresql":
        # sqlite+aiosqlite etc. are passed through untouched
        return original_url.render_as_string(hide_password=False)

    # sslmode / channel_binding are libpq options asyncpg does not understand
    query_params = {}
    if original_url.query:
        for key, value in original_url.query.items():
            if key not in ['sslmode', 'channel_binding']:
                query_params[key] = value

    # URL.set keeps credentials escaped when rendered
    url = original_url.set(
        drivername="postgresql+asyncpg",
        port=original_url.port or 5432,
        query=query_params,
    )
    return url.render_as_string(hide_password=False)


def get_connect_args():
    """Get connection arguments for asyncpg, especially for SSL"""
    url = make_url(settings.DATABASE_URL.strip().strip("'\""))
    connect_args = {}

    if url.query and url.query.get('sslmode') == 'require':
        connect_args['ssl'] = 'require'

    return connect_args


engine = create_async_engine(
    get_database_url(),
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=get_connect_args()
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()


async def get_db():
    """Get database session (generator for FastAPI dependency injection)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def close_db():
    """Close database connections"""
    await engine.dispose()
