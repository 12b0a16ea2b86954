"""
Attendance routes: check-in, check-out and ledger views.

Timestamps in request bodies are optional ISO-8601 strings; when omitted
the server clock is used.
"""

from flask import Blueprint, request, jsonify, g

from gymapp.errors import ValidationError
from gymapp.routes.member import member_required, get_json_body
from gymapp.services import attendance_service
from gymapp.timeutils import parse_timestamp, parse_day, to_local, utcnow

attendance_bp = Blueprint('attendance', __name__, url_prefix='/attendance')


def _int_arg(name, default=None):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer")


@attendance_bp.route('', methods=['GET'])
@member_required
def list_records():
    """
    Records for one calendar day (reporting timezone).

    Query params:
        date: YYYY-MM-DD (default today)
        member_id: optional member filter
    """
    raw_date = request.args.get('date')
    day = parse_day(raw_date) if raw_date else to_local(utcnow()).date()
    records = attendance_service.records_on(day, member_id=_int_arg('member_id'))
    return jsonify([r.to_dict() for r in records])


@attendance_bp.route('/recent')
@member_required
def recent():
    limit = _int_arg('limit', 50)
    if limit <= 0:
        raise ValidationError("'limit' must be greater than zero")
    records = attendance_service.recent_records(limit=min(limit, 500), member_id=_int_arg('member_id'))
    return jsonify([r.to_dict() for r in records])


@attendance_bp.route('/present')
@member_required
def present():
    """Open records, earliest arrival first."""
    records = attendance_service.currently_present()
    return jsonify({
        'count': len(records),
        'records': [r.to_dict() for r in records],
    })


@attendance_bp.route('/check-in', methods=['POST'])
@member_required
def check_in():
    body = get_json_body()
    record = attendance_service.check_in(g.member, parse_timestamp(body.get('time')))
    return jsonify({'success': True, 'record': record.to_dict()}), 201


@attendance_bp.route('/<int:record_id>/check-out', methods=['POST'])
@member_required
def check_out(record_id):
    body = get_json_body()
    record = attendance_service.check_out(
        record_id, parse_timestamp(body.get('time')), member=g.member
    )
    return jsonify({'success': True, 'record': record.to_dict()})


@attendance_bp.route('/<int:record_id>')
@member_required
def get_record(record_id):
    return jsonify(attendance_service.get_record(record_id).to_dict())


@attendance_bp.route('/<int:record_id>', methods=['DELETE'])
@member_required
def delete_record(record_id):
    attendance_service.delete_record(record_id)
    return '', 204
