from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gymapp import db
from gymapp.errors import DependencyError

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """API landing - lists the resource roots."""
    return jsonify({
        'app': 'Gym Manager',
        'resources': ['/auth', '/members', '/memberships', '/diet-plans',
                      '/attendance', '/workouts', '/stats', '/data'],
    })


@main_bp.route('/health')
def health():
    """Health check endpoint for Railway."""
    return {'status': 'healthy', 'app': 'Gym Manager'}


@main_bp.route('/health/db')
def health_db():
    """Check the datastore answers a trivial query."""
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        raise DependencyError(f'Database connection failed: {e}')
    return {'status': 'healthy', 'database': 'reachable'}
