from motor.motor_asyncio import AsyncIOMotorClient
from app.config.setting import settings
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    def __init__(self, uri: str, db_name: str):
        self.uri = uri
        self.client = None
        self.db = None
        self.db_name = db_name

    async def init_db(self):
        # Create connection to MongoDB using the connection string
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.db_name]
        await self.client.admin.command("ping")

        logger.info(f"Connected to MongoDB database '{self.db_name}'")

    def get_db(self):
        return self.db

    async def start_session(self):
        if self.client is None:
            raise Exception("MongoDB not connected")
        return await self.client.start_session()

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None

mongodb = MongoDB(uri=settings.mongo_uri, db_name=settings.mongo_db_name)
