import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name, default):
    return os.environ.get(name, default).lower() == 'true'


class Config:
    # App settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-change-me'

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///seatwatch.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Database connection pooling
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,           # Number of connections to maintain in pool
        'max_overflow': 10,       # Additional connections beyond pool_size
        'pool_timeout': 10,       # Seconds to wait for connection from pool
        'pool_recycle': 3600,     # Recycle connections after 1 hour
        'pool_pre_ping': True,    # Validate connections before use
    }

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600

    # Email settings (Flask-Mail)
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 465))
    MAIL_USE_TLS = _env_bool('MAIL_USE_TLS', 'false')
    MAIL_USE_SSL = _env_bool('MAIL_USE_SSL', 'true')
    MAIL_USERNAME = os.environ.get('EMAIL_USER', '')
    MAIL_PASSWORD = os.environ.get('EMAIL_PASS', '')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER') or os.environ.get('EMAIL_USER') or 'noreply@seatwatch.local'
    MAIL_TIMEOUT = float(os.environ.get('MAIL_TIMEOUT', 30))  # seconds before a send counts as failed

    # Sensor settings
    SEAT_COUNT = int(os.environ.get('SEAT_COUNT', 4))
    SENSOR_READ_TIMEOUT = float(os.environ.get('SENSOR_READ_TIMEOUT', 5))

    # Dispatch settings
    SEATWATCH_STORAGE = os.environ.get('SEATWATCH_STORAGE', 'sql')  # 'sql' or 'memory'
    DISPATCH_INTERVAL_SECONDS = int(os.environ.get('DISPATCH_INTERVAL_SECONDS', 30))
    DISPATCH_SCHEDULER_ENABLED = _env_bool('DISPATCH_SCHEDULER_ENABLED', 'true')
    SEND_QUEUE_CONFIRMATION = _env_bool('SEND_QUEUE_CONFIRMATION', 'true')
    # Put the popped request back when the availability email fails
    REQUEUE_ON_MAIL_FAILURE = _env_bool('REQUEUE_ON_MAIL_FAILURE', 'false')

    @classmethod
    def init_app(cls, app):
        pass


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True to log SQL queries

    @classmethod
    def init_app(cls, app):
        # Configure logging
        import logging
        from logging.handlers import RotatingFileHandler

        # Create logs directory if it doesn't exist
        if not os.path.exists('logs'):
            os.mkdir('logs')

        # Set SQLAlchemy and APScheduler logging level to WARNING to reduce noise
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
        logging.getLogger('apscheduler').setLevel(logging.WARNING)

        # File handler for application logs
        file_handler = RotatingFileHandler('logs/seatwatch.log', maxBytes=10240, backupCount=10)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
        file_handler.setLevel(logging.INFO)

        app.logger.addHandler(file_handler)
        app.logger.setLevel(logging.INFO)
        app.logger.info('SeatWatch startup')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = 'noreply@seatwatch.test'
    MAIL_TIMEOUT = 2
    SENSOR_READ_TIMEOUT = 2
    DISPATCH_SCHEDULER_ENABLED = False
    SEND_QUEUE_CONFIRMATION = False
    REQUEUE_ON_MAIL_FAILURE = False


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)

        # Log to stderr
        import logging
        from logging import StreamHandler
        stream_handler = StreamHandler()
        stream_handler.setLevel(logging.INFO)
        app.logger.addHandler(stream_handler)
        app.logger.setLevel(logging.INFO)


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
