"""
Statistics dashboard routes.

All aggregates are read-only. ``window_days`` may be passed as a query
parameter; it defaults to STATS_WINDOW_DAYS.
"""

from flask import Blueprint, request, jsonify

from gymapp.errors import ValidationError
from gymapp.routes.member import member_required
from gymapp.services import stats_service

stats_bp = Blueprint('stats', __name__, url_prefix='/stats')


def _positive_int_arg(name, default=None, maximum=3650):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer")
    if value <= 0 or value > maximum:
        raise ValidationError(f"'{name}' must be between 1 and {maximum}")
    return value


def _window():
    return _positive_int_arg('window_days')


@stats_bp.route('/signups')
@member_required
def signups():
    return jsonify(stats_service.signups_by_month())


@stats_bp.route('/usage-by-day')
@member_required
def usage_by_day():
    return jsonify(stats_service.usage_by_day_of_week(_window()))


@stats_bp.route('/peak-hours')
@member_required
def peak_hours():
    return jsonify(stats_service.peak_hours(_window()))


@stats_bp.route('/average-time')
@member_required
def average_time():
    return jsonify(stats_service.average_session_duration(_window()))


@stats_bp.route('/top-workouts')
@member_required
def top_workouts():
    limit = _positive_int_arg('limit', default=10, maximum=100)
    return jsonify(stats_service.top_workouts_by_calories(limit))


@stats_bp.route('/current-members')
@member_required
def current_members():
    return jsonify(stats_service.current_members())


@stats_bp.route('/retention-rate')
@member_required
def retention_rate():
    return jsonify(stats_service.retention_rate(_window()))


@stats_bp.route('/attendance-frequency')
@member_required
def attendance_frequency():
    return jsonify(stats_service.attendance_frequency(_window()))


@stats_bp.route('/all')
@member_required
def all_stats():
    return jsonify(stats_service.all_stats(_window()))
