import os

from dotenv import load_dotenv
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

load_dotenv()

db = SQLAlchemy()
login = LoginManager()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///feed_admin.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # duplicate bill guard
    DUPLICATE_BILL_WINDOW_SECONDS = int(os.getenv("DUPLICATE_BILL_WINDOW_SECONDS", 10))
    DUPLICATE_BILL_LOOKBACK = int(os.getenv("DUPLICATE_BILL_LOOKBACK", 5))

    CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", 300))
    TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", 60 * 60 * 24 * 7))
