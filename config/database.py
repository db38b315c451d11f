import logging
import re

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

USERS = 'users'
CLASSES = 'classes'
META = 'meta'


def mask_uri(uri):
    """Hide credentials in a connection string before it is logged"""
    return re.sub(r'//[^:/@]+:[^@]+@', '//***:***@', uri or '')


class Database:
    def __init__(self, settings, client=None):
        self.settings = settings
        self.client = client
        self.db = None

    def connect(self):
        """Connect to MongoDB and make sure indexes exist"""
        if self.db is not None:
            return self.db
        try:
            if self.client is None:
                logger.info("Connecting to MongoDB at %s", mask_uri(self.settings.MONGO_URI))
                self.client = MongoClient(
                    self.settings.MONGO_URI,
                    serverSelectionTimeoutMS=self.settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
                    socketTimeoutMS=self.settings.MONGO_SOCKET_TIMEOUT_MS,
                    maxPoolSize=self.settings.MONGO_MAX_POOL_SIZE,
                    minPoolSize=0,
                    maxIdleTimeMS=self.settings.MONGO_MAX_IDLE_TIME_MS,
                    waitQueueTimeoutMS=self.settings.MONGO_WAIT_QUEUE_TIMEOUT_MS,
                )
            db = self.client[self.settings.DB_NAME]
            self._ensure_indexes(db)
            self.db = db
            logger.info("Using database '%s'", self.settings.DB_NAME)
            return self.db
        except PyMongoError:
            logger.exception("MongoDB connection error")
            raise

    def _ensure_indexes(self, db):
        db[USERS].create_index([('email', ASCENDING)], unique=True)
        db[USERS].create_index([('role', ASCENDING), ('createdAt', DESCENDING)])
        db[CLASSES].create_index([('createdAt', DESCENDING)])
        db[CLASSES].create_index([('views', DESCENDING)])

    def get_collection(self, collection_name):
        """Get specific collection"""
        if self.db is None:
            self.connect()
        return self.db[collection_name]

    def ping(self):
        try:
            self.connect().command('ping')
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False

    def close(self):
        """Close database connection"""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None
