import os
import logging
from datetime import timedelta
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from dotenv import load_dotenv

# Load environment variables (override=True ensures .env values take precedence)
load_dotenv(override=True)

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


def configure_logging(app):
    """Set the app logger level and format from LOG_LEVEL."""
    default_level = 'DEBUG' if app.debug else 'INFO'
    level_name = app.config.get('LOG_LEVEL') or default_level
    level = getattr(logging, str(level_name).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in app.logger.handlers:
        handler.setFormatter(formatter)
    app.logger.setLevel(level)


def create_app(config_name=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-me')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///dev.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session configuration - 30 day persistent sessions
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=30)
    app.config['SESSION_COOKIE_SECURE'] = os.environ.get('RAILWAY_ENVIRONMENT') is not None  # HTTPS only in production
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    # Reporting: calendar days, weekdays and hours are taken in this timezone
    app.config['REPORTING_TIMEZONE'] = os.environ.get('REPORTING_TIMEZONE', 'UTC')
    app.config['STATS_WINDOW_DAYS'] = int(os.environ.get('STATS_WINDOW_DAYS', '30'))
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        app.config['SECRET_KEY'] = 'testing-secret'
        app.config['SESSION_COOKIE_SECURE'] = False
        app.config['REPORTING_TIMEZONE'] = 'UTC'
        app.config['STATS_WINDOW_DAYS'] = 30

    # Fix for postgres:// vs postgresql:// (some providers use older postgres:// format)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # JSON error responses for the whole API
    from gymapp.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from gymapp.routes.main import main_bp
    from gymapp.routes.member import auth_bp, member_bp
    from gymapp.routes.memberships import memberships_bp
    from gymapp.routes.diet_plans import diet_plans_bp
    from gymapp.routes.attendance import attendance_bp
    from gymapp.routes.workouts import workouts_bp
    from gymapp.routes.stats import stats_bp
    from gymapp.routes.api import data_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(member_bp)
    app.register_blueprint(memberships_bp)
    app.register_blueprint(diet_plans_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(workouts_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(data_bp)

    # Import models so they're known to Flask-Migrate
    from gymapp import models

    from gymapp.seed_workouts import register_commands
    register_commands(app)

    # Auto-run migrations in production (Railway)
    if os.environ.get('RAILWAY_ENVIRONMENT') and not app.config.get('TESTING'):
        with app.app_context():
            upgrade()

    return app
