import os


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


class BaseConfig:
    """
    Base configuration class using environment variables
    """

    # Application settings
    APP_NAME = os.environ.get('APP_NAME', 'Agenda de Clientes')

    # Cross-origin access for a separate front end
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging Configuration
    LOG_TO_STDOUT = _env_flag('LOG_TO_STDOUT')
    LOGGING_LEVEL = os.environ.get('LOGGING_LEVEL', 'INFO').upper()

    # Presentation
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', 'R$')

    # Reminder scheduling
    REMINDER_LEAD_MINUTES = int(os.environ.get('REMINDER_LEAD_MINUTES', 30))
    REMINDER_EVENING_HOUR = int(os.environ.get('REMINDER_EVENING_HOUR', 20))

    # Backup uploads
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))


class DatabaseConfig:
    """
    Database configuration with environment variable support
    """
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Connection Pool Settings
    SQLALCHEMY_POOL_SIZE = int(os.environ.get('DATABASE_POOL_SIZE', 10))
    SQLALCHEMY_POOL_RECYCLE = int(os.environ.get('DATABASE_POOL_RECYCLE', 1800))  # 30 minutes

    # Query Performance Settings
    SQLALCHEMY_ECHO = _env_flag('SQLALCHEMY_ECHO')
    SLOW_QUERY_THRESHOLD = float(os.environ.get('SLOW_QUERY_THRESHOLD', 0.5))  # In seconds

    @staticmethod
    def get_database_uri(config_name):
        """
        Generate database URI based on configuration environment

        Args:
            config_name: Name of the configuration environment
        Returns:
            str: Database connection URI
        """
        # For testing, always use in-memory SQLite
        if config_name == 'testing':
            return 'sqlite:///:memory:'

        db_url = os.environ.get('DATABASE_URL')
        if db_url:
            return db_url

        db_user = os.environ.get('DATABASE_USER')
        db_password = os.environ.get('DATABASE_PASSWORD')
        db_host = os.environ.get('DATABASE_HOST', 'localhost')
        db_port = os.environ.get('DATABASE_PORT', '3306')  # Default MySQL port
        db_name = os.environ.get('DATABASE_NAME', 'agenda_db')

        if all([db_user, db_password, db_host, db_name]):
            return f'mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}'

        # Local store next to the project
        default_db_path = os.path.join(
            os.path.abspath(os.path.dirname(__file__)),
            '..',
            'agenda.db'
        )
        return f'sqlite:///{os.path.normpath(default_db_path)}'


class DevelopmentConfig(BaseConfig, DatabaseConfig):
    """
    Development-specific configuration
    """
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('development')


class ProductionConfig(BaseConfig, DatabaseConfig):
    """
    Production-specific configuration
    """
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('production')


class TestingConfig(BaseConfig, DatabaseConfig):
    """
    Testing-specific configuration
    """
    TESTING = True
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('testing')


def get_config(config_name):
    """
    Factory function to return the appropriate configuration class

    :param config_name: Name of the configuration ('development', 'production', 'testing')
    :return: Configuration class
    """
    config_mapping = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_mapping.get(config_name.lower(), DevelopmentConfig)
