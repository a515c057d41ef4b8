from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
import structlog
from sqlalchemy import event
from sqlalchemy.engine import Engine
from retry import retry
import time

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
logger = structlog.get_logger()


# Database connection retry decorator
@retry(tries=3, delay=2, backoff=2)
def init_db_with_retry(app):
    """Initialize database with retry logic"""
    try:
        db.init_app(app)
        # Test connection
        with app.app_context():
            db.engine.connect().close()
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        raise


def create_app(config_name='development'):
    """
    Application factory function to create and configure the Flask application

    Args:
        config_name (str, optional): Name of the configuration environment.
                                     Defaults to 'development'.

    Returns:
        Flask: Configured Flask application instance
    """
    # Import config dynamically to avoid circular imports
    from .config import get_config
    from .services.storage_gateway import StorageGateway

    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)

    cors_options = {
        'origins': app.config['CORS_ORIGINS'],
        'methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        'allow_headers': ['Content-Type', 'Cache-Control', 'Pragma', 'Expires'],
        'expose_headers': ['Content-Disposition'],
    }
    CORS(app, **cors_options)
    logger.debug(f"CORS Origins configured: {app.config['CORS_ORIGINS']}")

    if app.config.get('LOG_TO_STDOUT'):
        _setup_logging(app)

    _configure_database(app)

    init_db_with_retry(app)
    migrate.init_app(app, db, directory=app.config.get('MIGRATIONS_DIR', 'migrations'))

    _configure_security(app)

    # One gateway per application, bound to the scoped session
    with app.app_context():
        gateway = StorageGateway(db.session)
        gateway.open()
    app.extensions['storage_gateway'] = gateway

    _register_blueprints(app)
    _setup_error_handlers(app)

    app.logger.info(f"Starting application in {config_name} mode")
    return app


def _register_blueprints(app):
    """
    Register application blueprints

    Args:
        app (Flask): Flask application instance
    """
    from .routes import (
        appointments_bp,
        clients_bp,
        pages_bp,
        exports_bp,
        backup_bp
    )

    blueprints = [
        (appointments_bp, '/appointments'),
        (clients_bp, '/clients'),
        (pages_bp, '/pages'),
        (exports_bp, '/exports'),
        (backup_bp, '/backup')
    ]

    for blueprint, url_prefix in blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)


def _setup_error_handlers(app):
    """
    Set up custom error handlers for the application

    Args:
        app (Flask): Flask application instance
    """
    from .services.storage_gateway import AppointmentNotFound

    @app.errorhandler(AppointmentNotFound)
    def appointment_not_found(error):
        app.logger.warning(f'Appointment not found: {error}')
        return {"error": str(error)}, 404

    @app.errorhandler(404)
    def page_not_found(error):
        app.logger.error(f'Page not found: {error}')
        return 'Page not found', 404

    @app.errorhandler(500)
    def internal_server_error(error):
        """
        Custom 500 error handler

        Args:
            error: Error object

        Returns:
            Plain error response
        """
        app.logger.error(f'Server Error: {error}')
        db.session.rollback()  # Rollback any pending database changes
        return 'An unexpected error occurred', 500


_query_timing_installed = False


def _configure_database(app):
    """Configure database specific settings"""
    global _query_timing_installed

    if 'mysql' in app.config['SQLALCHEMY_DATABASE_URI']:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_size': app.config.get('SQLALCHEMY_POOL_SIZE', 10),
            'pool_recycle': app.config.get('SQLALCHEMY_POOL_RECYCLE', 3600),
            'pool_pre_ping': True,
        }

    if _query_timing_installed:
        return
    _query_timing_installed = True
    threshold = app.config.get('SLOW_QUERY_THRESHOLD', 0.5)

    @event.listens_for(Engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(Engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total = time.time() - conn.info['query_start_time'].pop()
        if total > threshold:
            logger.warning(f"Slow query detected: {total:.2f}s\n{statement}")


def _configure_security(app):
    """Configure security headers"""

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = app.config.get(
            'CONTENT_SECURITY_POLICY',
            "default-src 'self'; style-src 'self' 'unsafe-inline'"
        )
        return response


def _setup_logging(app):
    """Setup enhanced logging configuration"""
    import logging
    import sys

    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.INFO)

    app.logger.addHandler(stream_handler)
    app.logger.setLevel(app.config.get('LOGGING_LEVEL', logging.INFO))
