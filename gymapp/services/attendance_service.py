"""
Session ledger: the attendance state machine.

Per member the ledger is either OUT (no open record) or IN (exactly one
record with check_out_time NULL). The "at most one open record" rule is
enforced by the database: a partial unique index rejects a second open
insert, and check-out is a single conditional UPDATE. No application lock
is taken, so concurrent request handlers stay correct.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy import update

from gymapp import db
from gymapp.errors import ConflictError, InvalidStateError, NotFoundError
from gymapp.models import AttendanceRecord
from gymapp.services import events
from gymapp.services.persistence import commit, run
from gymapp.timeutils import utcnow, local_day_bounds

STILL_PRESENT = 'Still in gym'


def open_record_for(member_id: int) -> Optional[AttendanceRecord]:
    return AttendanceRecord.query.filter(
        AttendanceRecord.member_id == member_id,
        AttendanceRecord.check_out_time.is_(None)
    ).first()


def check_in(member, check_in_time: datetime = None) -> AttendanceRecord:
    """
    Open a new attendance record for member.

    Raises ConflictError if the member already has an open record.
    """
    check_in_time = check_in_time or utcnow()

    if open_record_for(member.id) is not None:
        raise ConflictError(f"Member {member.id} is already checked in")

    record = AttendanceRecord(member_id=member.id, check_in_time=check_in_time)
    db.session.add(record)
    # A concurrent check-in that slipped past the read above trips the
    # partial unique index here
    commit('check-in', conflict_message=f"Member {member.id} is already checked in")

    current_app.logger.info(f"Check-in: member={member.id} record={record.id} at {check_in_time}")
    events.publish('attendance', events.INSERT, new=record.to_dict())
    return record


def check_out(record_id: int, check_out_time: datetime = None, member=None) -> AttendanceRecord:
    """
    Close an open attendance record.

    When member is given the record must belong to them. Raises
    NotFoundError for unknown records and InvalidStateError when the record
    is already closed or check_out_time is not after check_in_time. A failed
    check-out never mutates state.
    """
    check_out_time = check_out_time or utcnow()

    stmt = update(AttendanceRecord).where(
        AttendanceRecord.id == record_id,
        AttendanceRecord.check_out_time.is_(None),
        AttendanceRecord.check_in_time < check_out_time,
    )
    if member is not None:
        stmt = stmt.where(AttendanceRecord.member_id == member.id)
    stmt = stmt.values(check_out_time=check_out_time).execution_options(synchronize_session=False)

    result = run('check-out', stmt)
    if result.rowcount == 1:
        commit('check-out')
        record = db.session.get(AttendanceRecord, record_id)
        db.session.refresh(record)
        current_app.logger.info(f"Check-out: member={record.member_id} record={record.id} at {check_out_time}")
        events.publish('attendance', events.UPDATE, new=record.to_dict())
        return record

    # Nothing was updated; work out why
    db.session.rollback()
    record = db.session.get(AttendanceRecord, record_id)
    if record is None or (member is not None and record.member_id != member.id):
        raise NotFoundError(f"Attendance record {record_id} not found")
    if record.check_out_time is not None:
        raise InvalidStateError(f"Attendance record {record_id} is already checked out")
    raise InvalidStateError("Check-out time must be after check-in time")


def duration(record) -> Optional[timedelta]:
    """Full-precision time in the gym, or None while still present."""
    if record.check_out_time is None:
        return None
    return record.check_out_time - record.check_in_time


def duration_minutes(record) -> Optional[int]:
    """Duration floored to whole minutes, or None while still present."""
    elapsed = duration(record)
    if elapsed is None:
        return None
    return int(elapsed.total_seconds() // 60)


def format_duration(record) -> str:
    minutes = duration_minutes(record)
    if minutes is None:
        return STILL_PRESENT
    return f"{minutes // 60}h {minutes % 60}m"


def currently_present() -> list:
    """Open records, earliest arrival first."""
    return AttendanceRecord.query.filter(
        AttendanceRecord.check_out_time.is_(None)
    ).order_by(AttendanceRecord.check_in_time.asc(), AttendanceRecord.id.asc()).all()


def occupancy() -> int:
    return AttendanceRecord.query.filter(AttendanceRecord.check_out_time.is_(None)).count()


def records_on(day: date, member_id: int = None) -> list:
    """Records checked in on a reporting-timezone calendar day, newest first."""
    start, end = local_day_bounds(day)
    query = AttendanceRecord.query.filter(
        AttendanceRecord.check_in_time >= start,
        AttendanceRecord.check_in_time < end
    )
    if member_id is not None:
        query = query.filter(AttendanceRecord.member_id == member_id)
    return query.order_by(AttendanceRecord.check_in_time.desc(), AttendanceRecord.id.desc()).all()


def recent_records(limit: int = 50, member_id: int = None) -> list:
    query = AttendanceRecord.query
    if member_id is not None:
        query = query.filter(AttendanceRecord.member_id == member_id)
    return query.order_by(
        AttendanceRecord.check_in_time.desc(), AttendanceRecord.id.desc()
    ).limit(limit).all()


def get_record(record_id: int) -> AttendanceRecord:
    record = db.session.get(AttendanceRecord, record_id)
    if record is None:
        raise NotFoundError(f"Attendance record {record_id} not found")
    return record


def delete_record(record_id: int) -> None:
    """Remove a record outright (data correction). Members are untouched."""
    record = get_record(record_id)
    old = record.to_dict()
    db.session.delete(record)
    commit('attendance delete')

    current_app.logger.info(f"Deleted attendance record {record_id} (member={old['member_id']})")
    events.publish('attendance', events.DELETE, old=old)
