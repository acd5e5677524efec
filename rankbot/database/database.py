from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker

from rankbot.config import Config
from rankbot.database.models import Base
from rankbot.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.RANKINGS_DATABASE_URL
        self.engine: Optional[AsyncEngine] = None
        self.session_factory = None

    async def initialize(self):
        """Connect to the ranking store and make sure the rankings table exists"""
        self.logger.info("Initializing ranking store connection...")

        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Ranking store initialized successfully")

    async def close(self):
        """Dispose of the engine and its connection pool"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Ranking store connection closed")
