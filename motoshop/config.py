import os
from pathlib import Path


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration - shared across all environments"""

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # None means "ask DBManager" (MYSQL_URL / DB_* / SQLite fallback)
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI')

    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    # Site-relative references such as /uploads/services/x.jpg resolve against this
    SITE_ROOT = os.environ.get('SITE_ROOT', str(Path(__file__).resolve().parents[1]))

    # Shop identity printed on invoices
    SHOP_NAME = os.environ.get('SHOP_NAME', 'Taller de Motos Moreira Racing')
    SHOP_TAGLINE = os.environ.get(
        'SHOP_TAGLINE', 'Taller de Motos Moreira Racing - Gracias por confiar en nosotros')
    LOGO_PATH = os.environ.get('LOGO_PATH', os.path.join(SITE_ROOT, 'assets', 'logo.png'))

    # Paths
    INVOICES_DIR = os.environ.get('INVOICES_DIR', os.path.join(SITE_ROOT, 'invoices'))
    UPLOADS_DIR = os.environ.get('UPLOADS_DIR', os.path.join(SITE_ROOT, 'uploads'))
    SERVICES_UPLOAD_SUBDIR = 'services'

    # File upload configurations
    UPLOADS_ENABLED = _env_flag('UPLOADS_ENABLED', True)
    MAX_UPLOAD_SIZE = int(os.environ.get('MAX_UPLOAD_SIZE', 5 * 1024 * 1024))  # 5MB
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 64 * 1024
    ALLOWED_IMAGE_MIMETYPES = {'image/jpeg', 'image/png', 'image/webp', 'image/gif', 'image/svg+xml'}

    # Invoice images
    IMAGE_FETCH_TIMEOUT = float(os.environ.get('IMAGE_FETCH_TIMEOUT', 10))
    IMAGE_FETCH_WORKERS = int(os.environ.get('IMAGE_FETCH_WORKERS', 4))

    # "Today" on invoices is computed in this zone
    DISPLAY_TIMEZONE = os.environ.get('DISPLAY_TIMEZONE', 'America/Bogota')

    RATELIMIT_ENABLED = True
    LOG_TO_FILE = True


class DevConfig(Config):
    """Development configuration"""
    DEBUG = True
    FLASK_HOST = '0.0.0.0'
    FLASK_PORT = int(os.environ.get('PORT', 3000))


class TestingConfig(Config):
    """Testing configuration - in-memory SQLite, no rate limiting"""
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    FLASK_HOST = '::'
    FLASK_PORT = int(os.environ.get('PORT', 3000))


def get_config():
    env = os.environ.get('FLASK_ENV', 'development').lower()
    if env == 'production':
        return ProductionConfig
    if env == 'testing':
        return TestingConfig
    return DevConfig
