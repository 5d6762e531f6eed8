import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///blobverse.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create missing tables on startup (migrations remain the source of truth)
    DB_AUTO_CREATE = os.environ.get('DB_AUTO_CREATE', '1') == '1'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    # Comma-separated; '*' allows every origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    CORS_METHODS = os.environ.get('CORS_METHODS', 'GET,POST,PUT,DELETE,OPTIONS')
    # Housekeeping intervals (seconds). 0 disables.
    MATCHMAKING_SWEEP_SEC = int(os.environ.get('MATCHMAKING_SWEEP_SEC', '5'))
    STATS_INTERVAL_SEC = int(os.environ.get('STATS_INTERVAL_SEC', '30'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
