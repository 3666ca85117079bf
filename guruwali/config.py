import os
from datetime import timedelta


class Config:

    SECRET_KEY = os.environ.get(
        "SECRET_KEY",
        "guru_wali_secret_key"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    ALLOWED_IMPORT_EXTENSIONS = {"csv", "xlsx"}
    ALLOWED_PHOTO_EXTENSIONS = {"jpg", "jpeg", "png"}

    MAX_PHOTO_SIZE = 2 * 1024 * 1024
    # whole request body, photos and import spreadsheets alike
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    MAX_IMPORT_ROWS = 1000
    PHOTO_MAX_WIDTH = 600

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    SESSION_COOKIE_NAME = "guru_wali_session"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.environ.get("APP_ENV") == "production"
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    REMEMBER_COOKIE_DURATION = timedelta(days=7)

    if os.environ.get("RENDER"):

        SQLALCHEMY_DATABASE_URI = os.environ.get(
            "DATABASE_URL",
            "sqlite:////tmp/guruwali.db"
        )
        UPLOAD_FOLDER = "/tmp/uploads"

    else:
        SQLALCHEMY_DATABASE_URI = os.environ.get(
            "DATABASE_URL",
            "sqlite:///guruwali.db"
        )
        UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")


class TestingConfig(Config):

    TESTING = True
    SECRET_KEY = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = "DEBUG"
