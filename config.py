import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///storefront.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration (tokens are issued by the auth service, we only verify them)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", 900))  # 15 minutes

    # Cancellation policy
    CANCELLATION_HOURS = int(os.getenv("CANCELLATION_HOURS", 72))
    MEMBERSHIP_CONFIG_VERSION = os.getenv("MEMBERSHIP_CONFIG_VERSION", "v1")

    # Frontend URL for notification links
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
