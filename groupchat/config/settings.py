"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    TESTING = os.getenv("TESTING", "false").lower() in _TRUTHY
    DEBUG = os.getenv("DEBUG", "false").lower() in _TRUTHY

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth (tokens are issued by the identity provider, verified here)
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "your_service_name")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "your_service_audience")

    # Storage: "redis" or "memory"
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "redis").lower()

    # Redis settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "groupchat")
    # Optimistic-lock retries for conditional writes (WATCH/MULTI)
    REDIS_WRITE_RETRIES: int = int(os.getenv("REDIS_WRITE_RETRIES", "5"))

    # Background tasks: "inprocess", "redis" or "inline"
    # - "inprocess": asyncio task in the API process, lost on restart
    # - "redis": queued in Redis, executed by run_worker.py
    # - "inline": awaited before the request returns (development/tests)
    TASK_BACKEND: str = os.getenv("TASK_BACKEND", "inprocess").lower()
    TASK_QUEUE_KEY: str = os.getenv("TASK_QUEUE_KEY", "groupchat:tasks:queue")
    TASK_WORKER_POLL_SECONDS: int = int(os.getenv("TASK_WORKER_POLL_SECONDS", "5"))

    # Push notifications: "fcm" or "log"
    PUSH_BACKEND: str = os.getenv("PUSH_BACKEND", "log").lower()
    FCM_PROJECT_ID: str = os.getenv("FCM_PROJECT_ID", "")
    FCM_ACCESS_TOKEN: str = os.getenv("FCM_ACCESS_TOKEN", "")
    FCM_ENDPOINT: str = os.getenv("FCM_ENDPOINT", "https://fcm.googleapis.com/v1")
    PUSH_TIMEOUT_SECONDS: float = float(os.getenv("PUSH_TIMEOUT_SECONDS", "10"))
    PUSH_DRY_RUN: bool = os.getenv("PUSH_DRY_RUN", "false").lower() in _TRUTHY
    PUSH_TITLE: str = os.getenv("PUSH_TITLE", "Received message from user")

    # Domain
    DEFAULT_PHONE_REGION: str = os.getenv("DEFAULT_PHONE_REGION", "US")
    MESSAGE_WRITE_ATTEMPTS: int = int(os.getenv("MESSAGE_WRITE_ATTEMPTS", "3"))


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORAGE_BACKEND = "memory"
    TASK_BACKEND = "inline"
    PUSH_BACKEND = "log"


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = Config.APP_ENV
    return config.get(env, config["default"])
