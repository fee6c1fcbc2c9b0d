import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.getenv("SESSION_SECRET", "gcmn-library-secret-2024")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "gcmn-library-jwt")
    JWT_VERIFY_SUB = False
    # flask-restx hands JWT errors back to flask-jwt-extended's handlers
    PROPAGATE_EXCEPTIONS = True

    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json")
    DATA_FILE = os.getenv("LIBRARY_DATA_FILE", os.path.join(".data", "data.json"))
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///db.sqlite")
    SQLALCHEMY_ECHO = False

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@samad.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "gcmn123")
    ADMIN_SECRET_KEY = os.getenv("ADMIN_SECRET_KEY", "GCMN-ADMIN-ONLY")

    CARD_VALIDITY_DAYS = 365
    BORROW_PERIOD_DAYS = 14
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DEBUG = True


class DevConfig(Config):
    SQLALCHEMY_ECHO = True


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    STORAGE_BACKEND = "sql"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


config_dict: dict[str, Config] = {
    "dev": DevConfig,
    "testing": TestConfig,
}
