import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Settings:
    def __init__(self, **overrides):
        # Database
        self.MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/learnstream')
        self.DB_NAME = os.getenv('DB_NAME', 'learnstream')
        self.MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv('MONGO_SERVER_SELECTION_TIMEOUT_MS', 5000))
        self.MONGO_SOCKET_TIMEOUT_MS = int(os.getenv('MONGO_SOCKET_TIMEOUT_MS', 45000))
        self.MONGO_MAX_POOL_SIZE = int(os.getenv('MONGO_MAX_POOL_SIZE', 10))
        self.MONGO_MAX_IDLE_TIME_MS = int(os.getenv('MONGO_MAX_IDLE_TIME_MS', 10000))
        self.MONGO_WAIT_QUEUE_TIMEOUT_MS = int(os.getenv('MONGO_WAIT_QUEUE_TIMEOUT_MS', 5000))

        # Auth
        self.JWT_SECRET = os.getenv('JWT_SECRET', 'learnstream-dev-secret')
        self.JWT_ALGORITHM = 'HS256'
        self.JWT_EXPIRES_DAYS = int(os.getenv('JWT_EXPIRES_DAYS', 7))
        self.BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 10))

        # Application
        self.CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
        self.DEFAULT_CLASS_LIMIT = int(os.getenv('DEFAULT_CLASS_LIMIT', 50))
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.PORT = int(os.getenv('PORT', 5000))
        self.DEBUG = _env_bool('DEBUG')

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def cors_origins(self):
        if self.CORS_ORIGINS.strip() == '*':
            return '*'
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]


settings = Settings()
