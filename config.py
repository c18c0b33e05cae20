import os


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///machinatrack.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # days before a due date that an item is flagged "due_soon"
    DUE_SOON_LEAD_DAYS = int(os.getenv('DUE_SOON_LEAD_DAYS', '7'))
    UPCOMING_MAINTENANCE_DAYS = int(os.getenv('UPCOMING_MAINTENANCE_DAYS', '30'))
    DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', '50'))


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
