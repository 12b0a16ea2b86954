"""
Generic table pass-through for the admin UI.

Only whitelisted tables are exposed. Attendance and workout logs are
read-only here so the ledger invariants can't be bypassed; their writes go
through /attendance and /workouts.
"""

from flask import Blueprint, jsonify, abort, current_app

from gymapp import db
from gymapp.errors import NotFoundError, ValidationError
from gymapp.models import AttendanceRecord, Workout, WorkoutLogEntry
from gymapp.routes.member import member_required, get_json_body
from gymapp.services import events
from gymapp.services.workout_service import non_negative_int
from gymapp.services.persistence import commit

data_bp = Blueprint('data', __name__, url_prefix='/data')

# column -> (type, nullable)
WORKOUT_COLUMNS = {
    'name': (str, False),
    'description': (str, True),
    'difficulty': (str, True),
    'duration': (int, True),
    'calories_burned': (int, False),
}

# table name -> (model, writable columns or None for read-only)
TABLES = {
    'workouts': (Workout, WORKOUT_COLUMNS),
    'workout_logs': (WorkoutLogEntry, None),
    'attendance': (AttendanceRecord, None),
}


def _table(table):
    if table not in TABLES:
        raise NotFoundError(f"Unknown table '{table}'")
    return TABLES[table]


def _writable(table):
    model, columns = _table(table)
    if columns is None:
        abort(405, description=f"Table '{table}' is read-only here")
    return model, columns


def _get_row(model, table, item_id):
    row = db.session.get(model, item_id)
    if row is None:
        raise NotFoundError('Item not found')
    return row


def _clean_value(column, kind, nullable, value):
    if value is None:
        if not nullable:
            raise ValidationError(f"'{column}' is required")
        return None
    if kind is int:
        return non_negative_int(value, column)
    if not isinstance(value, str):
        raise ValidationError(f"'{column}' must be a string")
    value = value.strip()
    if not value and not nullable:
        raise ValidationError(f"'{column}' must not be empty")
    return value


def _clean_payload(table, columns, body):
    """Reject unknown columns and coerce each value to its column type."""
    unknown = [key for key in body if key not in columns]
    if unknown:
        raise ValidationError(f"Unknown columns for '{table}'", detail={'fields': unknown})
    return {
        column: _clean_value(column, *columns[column], value)
        for column, value in body.items()
    }


@data_bp.route('/<table>')
@member_required
def list_rows(table):
    model, _ = _table(table)
    rows = model.query.order_by(model.id).all()
    return jsonify([row.to_dict() for row in rows])


@data_bp.route('/<table>/<int:item_id>')
@member_required
def get_row(table, item_id):
    model, _ = _table(table)
    return jsonify(_get_row(model, table, item_id).to_dict())


@data_bp.route('/<table>', methods=['POST'])
@member_required
def create_row(table):
    model, columns = _writable(table)
    payload = _clean_payload(table, columns, get_json_body())
    if table == 'workouts' and not payload.get('name'):
        raise ValidationError("'name' is required")

    row = model(**payload)
    db.session.add(row)
    commit(f'{table} insert')

    current_app.logger.info(f"Created {table} row {row.id}")
    events.publish(table, events.INSERT, new=row.to_dict())
    return jsonify(row.to_dict()), 201


@data_bp.route('/<table>/<int:item_id>', methods=['PUT'])
@member_required
def update_row(table, item_id):
    model, columns = _writable(table)
    row = _get_row(model, table, item_id)
    payload = _clean_payload(table, columns, get_json_body())

    old = row.to_dict()
    for key, value in payload.items():
        setattr(row, key, value)
    commit(f'{table} update')

    events.publish(table, events.UPDATE, new=row.to_dict(), old=old)
    return jsonify(row.to_dict())


@data_bp.route('/<table>/<int:item_id>', methods=['DELETE'])
@member_required
def delete_row(table, item_id):
    model, _ = _writable(table)
    row = _get_row(model, table, item_id)

    old = row.to_dict()
    db.session.delete(row)
    commit(f'{table} delete')

    current_app.logger.info(f"Deleted {table} row {item_id}")
    events.publish(table, events.DELETE, old=old)
    return '', 204
