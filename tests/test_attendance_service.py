import random
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from gymapp import db
from gymapp.errors import ConflictError, GymError, InvalidStateError, NotFoundError
from gymapp.models import AttendanceRecord
from gymapp.services import attendance_service, events


def open_count(member_id):
    return AttendanceRecord.query.filter(
        AttendanceRecord.member_id == member_id,
        AttendanceRecord.check_out_time.is_(None)
    ).count()


def test_check_in_then_out_gives_ninety_minutes(make_member):
    member = make_member()
    record = attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))
    assert attendance_service.currently_present() == [record]

    closed = attendance_service.check_out(record.id, datetime(2026, 6, 15, 10, 30))

    assert attendance_service.duration(closed) == timedelta(minutes=90)
    assert attendance_service.duration_minutes(closed) == 90
    assert attendance_service.format_duration(closed) == '1h 30m'
    assert attendance_service.currently_present() == []


def test_double_check_in_conflicts(make_member):
    member = make_member()
    attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))

    with pytest.raises(ConflictError):
        attendance_service.check_in(member, datetime(2026, 6, 15, 9, 5))
    assert open_count(member.id) == 1


def test_racing_check_in_is_rejected_by_the_database(make_member, monkeypatch):
    member = make_member()
    attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))

    # Simulate a concurrent handler that read "no open record" before ours committed
    monkeypatch.setattr(attendance_service, 'open_record_for', lambda member_id: None)

    with pytest.raises(ConflictError):
        attendance_service.check_in(member, datetime(2026, 6, 15, 9, 1))
    assert open_count(member.id) == 1


def test_partial_index_allows_many_closed_records_but_one_open(make_member, add_visit):
    member = make_member()
    add_visit(member, datetime(2026, 6, 1, 9), datetime(2026, 6, 1, 10))
    add_visit(member, datetime(2026, 6, 2, 9), datetime(2026, 6, 2, 10))
    add_visit(member, datetime(2026, 6, 3, 9))

    with pytest.raises(IntegrityError):
        add_visit(member, datetime(2026, 6, 3, 11))
    db.session.rollback()


def test_check_in_again_after_check_out(make_member):
    member = make_member()
    first = attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))
    attendance_service.check_out(first.id, datetime(2026, 6, 15, 10, 0))

    second = attendance_service.check_in(member, datetime(2026, 6, 15, 18, 0))
    assert second.id != first.id
    assert open_count(member.id) == 1


def test_check_out_unknown_record(make_member):
    with pytest.raises(NotFoundError):
        attendance_service.check_out(9999, datetime(2026, 6, 15, 10, 0))


def test_check_out_closed_record_fails_without_mutation(make_member):
    member = make_member()
    record = attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))
    attendance_service.check_out(record.id, datetime(2026, 6, 15, 10, 0))

    with pytest.raises(InvalidStateError):
        attendance_service.check_out(record.id, datetime(2026, 6, 15, 11, 0))

    stored = attendance_service.get_record(record.id)
    assert stored.check_out_time == datetime(2026, 6, 15, 10, 0)


@pytest.mark.parametrize('minutes_after', [0, -5])
def test_check_out_must_follow_check_in(make_member, minutes_after):
    member = make_member()
    check_in_time = datetime(2026, 6, 15, 9, 0)
    record = attendance_service.check_in(member, check_in_time)

    with pytest.raises(InvalidStateError):
        attendance_service.check_out(record.id, check_in_time + timedelta(minutes=minutes_after))
    assert attendance_service.get_record(record.id).check_out_time is None


def test_check_out_of_someone_elses_record_is_not_found(make_member):
    owner = make_member()
    other = make_member()
    record = attendance_service.check_in(owner, datetime(2026, 6, 15, 9, 0))

    with pytest.raises(NotFoundError):
        attendance_service.check_out(record.id, datetime(2026, 6, 15, 10, 0), member=other)
    assert attendance_service.get_record(record.id).is_open


def test_open_record_reports_still_present():
    record = AttendanceRecord(member_id=1, check_in_time=datetime(2026, 6, 15, 9, 0))
    assert attendance_service.duration(record) is None
    assert attendance_service.duration_minutes(record) is None
    assert attendance_service.format_duration(record) == 'Still in gym'


def test_duration_is_monotonic_in_check_out_time():
    check_in_time = datetime(2026, 6, 15, 9, 0)
    previous = None
    for seconds in [1, 59, 60, 61, 3599, 3600, 5400, 86400]:
        record = AttendanceRecord(
            member_id=1,
            check_in_time=check_in_time,
            check_out_time=check_in_time + timedelta(seconds=seconds),
        )
        elapsed = attendance_service.duration(record)
        if previous is not None:
            assert elapsed >= previous
            assert attendance_service.duration_minutes(record) >= previous.total_seconds() // 60
        previous = elapsed


def test_duration_keeps_seconds_but_display_floors():
    check_in_time = datetime(2026, 6, 15, 9, 0)
    record = AttendanceRecord(
        member_id=1,
        check_in_time=check_in_time,
        check_out_time=check_in_time + timedelta(minutes=44, seconds=59),
    )
    assert attendance_service.duration(record).total_seconds() == 44 * 60 + 59
    assert attendance_service.duration_minutes(record) == 44


def test_currently_present_orders_by_arrival(make_member):
    late = make_member()
    early = make_member()
    late_record = attendance_service.check_in(late, datetime(2026, 6, 15, 10, 0))
    early_record = attendance_service.check_in(early, datetime(2026, 6, 15, 8, 0))

    assert attendance_service.currently_present() == [early_record, late_record]
    assert attendance_service.occupancy() == 2


def test_records_on_filters_by_day_and_member(make_member, add_visit):
    alice = make_member()
    bob = make_member()
    add_visit(alice, datetime(2026, 6, 14, 23, 30), datetime(2026, 6, 15, 0, 30))
    a2 = add_visit(alice, datetime(2026, 6, 15, 7, 0), datetime(2026, 6, 15, 8, 0))
    b1 = add_visit(bob, datetime(2026, 6, 15, 9, 0))

    assert attendance_service.records_on(date(2026, 6, 15)) == [b1, a2]
    assert attendance_service.records_on(date(2026, 6, 15), member_id=alice.id) == [a2]
    assert attendance_service.records_on(date(2026, 6, 16)) == []


def test_records_on_uses_reporting_timezone(app, make_member, add_visit):
    app.config['REPORTING_TIMEZONE'] = 'America/New_York'
    member = make_member()
    # 02:00 UTC on the 16th is still the evening of the 15th in New York
    record = add_visit(member, datetime(2026, 6, 16, 2, 0))

    assert attendance_service.records_on(date(2026, 6, 15)) == [record]
    assert attendance_service.records_on(date(2026, 6, 16)) == []


def test_delete_record(make_member):
    member = make_member()
    record = attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))

    attendance_service.delete_record(record.id)

    assert db.session.get(AttendanceRecord, record.id) is None
    assert attendance_service.occupancy() == 0
    with pytest.raises(NotFoundError):
        attendance_service.delete_record(record.id)


def test_ledger_publishes_change_events(make_member):
    received = []
    receiver = events.subscribe('attendance', received.append)
    try:
        member = make_member()
        record = attendance_service.check_in(member, datetime(2026, 6, 15, 9, 0))
        attendance_service.check_out(record.id, datetime(2026, 6, 15, 9, 45))
        attendance_service.delete_record(record.id)
    finally:
        events.unsubscribe('attendance', receiver)

    assert [e.event_type for e in received] == ['INSERT', 'UPDATE', 'DELETE']
    assert received[1].new['duration_minutes'] == 45
    assert received[2].old['id'] == record.id


def test_random_interleaving_keeps_one_open_record_per_member(make_member):
    rng = random.Random(1234)
    members = [make_member() for _ in range(3)]
    clock = datetime(2026, 6, 1, 6, 0)

    for _ in range(150):
        clock += timedelta(minutes=rng.randint(1, 30))
        member = rng.choice(members)
        try:
            if rng.random() < 0.5:
                attendance_service.check_in(member, clock)
            else:
                records = AttendanceRecord.query.filter_by(member_id=member.id).all()
                if not records:
                    continue
                attendance_service.check_out(rng.choice(records).id, clock)
        except GymError:
            pass

        for m in members:
            assert open_count(m.id) <= 1

    for record in AttendanceRecord.query.all():
        assert record.check_out_time is None or record.check_out_time > record.check_in_time
