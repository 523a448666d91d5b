"""
Application Configuration
Loads environment variables and provides configuration classes for different environments
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))


class Config:
    """Base configuration class"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'canledger.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    # Business Configuration (printed on receipts and ledger cards)
    BUSINESS_NAME = os.environ.get('BUSINESS_NAME', 'Kanchan Mineral Water')
    BUSINESS_ADDRESS = os.environ.get('BUSINESS_ADDRESS', '5, Labour Colony, Nai Abadi, Mandsaur')
    BUSINESS_PHONE = os.environ.get('BUSINESS_PHONE', '07422-408555')
    CURRENCY = os.environ.get('CURRENCY', 'INR')
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', 'Rs.')

    # Default unit prices used when the price table is seeded
    DEFAULT_SHOP_PRICE = float(os.environ.get('DEFAULT_SHOP_PRICE', 20))
    DEFAULT_MONTHLY_PRICE = float(os.environ.get('DEFAULT_MONTHLY_PRICE', 25))
    DEFAULT_ORDER_PRICE = float(os.environ.get('DEFAULT_ORDER_PRICE', 30))

    # Ledger: opening balance for a customer's first entry
    # False -> 0, True -> the customer's baseline can_qty
    OPENING_BALANCE_FROM_CAN_QTY = os.environ.get('OPENING_BALANCE_FROM_CAN_QTY', 'False').lower() == 'true'

    # Logging
    LOG_FOLDER = os.path.join(basedir, 'logs')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Caching
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')  # SimpleCache, RedisCache, NullCache
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 60))
    CACHE_REDIS_URL = os.environ.get('CACHE_REDIS_URL', 'redis://localhost:6379/0')

    # Rate limiting
    RATELIMIT_ENABLED = os.environ.get('RATELIMIT_ENABLED', 'True').lower() == 'true'
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '2000 per day;300 per hour')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Sentry Error Tracking (optional)
    SENTRY_DSN = os.environ.get('SENTRY_DSN', '')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True to see SQL queries


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CACHE_TYPE = 'NullCache'
    RATELIMIT_ENABLED = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
