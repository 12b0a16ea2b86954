"""
Statistics dashboard aggregates.

Read-only queries over attendance, members and the workout catalog. Windows
run from local midnight today minus window_days up to now, so a 30 day
window matches "current_date - interval '30 days'"; later check-ins are
not counted. Counting happens in SQL where it is portable; day-of-week and
hour-of-day grouping is done in Python because it depends on the reporting
timezone.
"""

from collections import Counter
from datetime import datetime, time

from flask import current_app
from sqlalchemy import func, distinct

from gymapp import db
from gymapp.models import AttendanceRecord, Member, Workout
from gymapp.services import attendance_service
from gymapp.timeutils import utcnow, to_local, to_utc_naive, reporting_tz, window_start, isoformat

DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

# (minimum visits in window, label), checked top down
FREQUENCY_BUCKETS = [
    (20, '5+ times per week'),
    (12, '3-4 times per week'),
    (4, '1-2 times per week'),
    (0, 'Less than once a week'),
]


def _window_days(window_days):
    if window_days is None:
        return current_app.config.get('STATS_WINDOW_DAYS', 30)
    return window_days


def _in_window(start, end):
    return [AttendanceRecord.check_in_time >= start, AttendanceRecord.check_in_time < end]


def _check_ins_between(start, end):
    return db.session.query(
        AttendanceRecord.member_id, AttendanceRecord.check_in_time
    ).filter(*_in_window(start, end)).all()


def signups_by_month(now: datetime = None) -> list:
    """Member signups per month of the current year, month ascending."""
    now = now or utcnow()
    local_now = to_local(now)
    year_start = to_utc_naive(datetime.combine(
        local_now.date().replace(month=1, day=1), time.min, tzinfo=reporting_tz()
    ))

    created = db.session.query(Member.created_at).filter(
        Member.created_at >= year_start, Member.created_at < now
    ).all()
    counts = Counter(to_local(created_at).strftime('%Y-%m') for (created_at,) in created)
    return [{'month': month, 'count': counts[month]} for month in sorted(counts)]


def usage_by_day_of_week(window_days: int = None, now: datetime = None) -> list:
    """Visits and distinct members for each weekday, Sunday (0) first."""
    now = now or utcnow()
    start = window_start(_window_days(window_days), now)

    visits = Counter()
    members = {day: set() for day in range(7)}
    for member_id, check_in_time in _check_ins_between(start, now):
        # Python weekday() is Monday=0; shift to Sunday=0
        day = (to_local(check_in_time).weekday() + 1) % 7
        visits[day] += 1
        members[day].add(member_id)

    return [
        {
            'day_of_week': day,
            'day_name': DAY_NAMES[day],
            'total_visits': visits[day],
            'unique_members': len(members[day]),
        }
        for day in range(7)
    ]


def peak_hours(window_days: int = None, now: datetime = None) -> list:
    """Check-ins per hour of day (0-23), only hours that saw check-ins."""
    now = now or utcnow()
    start = window_start(_window_days(window_days), now)
    counts = Counter(to_local(check_in_time).hour for _, check_in_time in _check_ins_between(start, now))
    return [{'hour_of_day': hour, 'check_ins': counts[hour]} for hour in sorted(counts)]


def average_session_duration(window_days: int = None, now: datetime = None) -> dict:
    """Mean minutes between check-in and check-out over closed records."""
    now = now or utcnow()
    start = window_start(_window_days(window_days), now)
    closed = AttendanceRecord.query.filter(
        *_in_window(start, now),
        AttendanceRecord.check_out_time.isnot(None)
    ).all()

    if not closed:
        return {'avg_minutes': None}

    total_seconds = sum(attendance_service.duration(r).total_seconds() for r in closed)
    return {'avg_minutes': round(total_seconds / len(closed) / 60, 2)}


def retention_rate(window_days: int = None, now: datetime = None) -> dict:
    """
    Share of established members who visited during the window.

    The denominator counts members created before the window started; when
    there are none the rate is 0 rather than an error.
    """
    now = now or utcnow()
    start = window_start(_window_days(window_days), now)

    active_count = db.session.query(
        func.count(distinct(AttendanceRecord.member_id))
    ).filter(*_in_window(start, now)).scalar() or 0
    total_count = Member.query.filter(Member.created_at < start).count()

    rate = round(active_count / total_count * 100, 2) if total_count else 0
    return {
        'active_count': active_count,
        'total_count': total_count,
        'retention_rate': rate,
    }


def frequency_label(visit_count: int) -> str:
    for minimum, label in FREQUENCY_BUCKETS:
        if visit_count >= minimum:
            return label
    return FREQUENCY_BUCKETS[-1][1]


def attendance_frequency(window_days: int = None, now: datetime = None) -> list:
    """Members bucketed by visits in the window, buckets in fixed order."""
    now = now or utcnow()
    start = window_start(_window_days(window_days), now)

    visit_counts = db.session.query(
        AttendanceRecord.member_id, func.count(AttendanceRecord.id)
    ).filter(
        *_in_window(start, now)
    ).group_by(AttendanceRecord.member_id).all()

    buckets = Counter(frequency_label(count) for _, count in visit_counts)
    return [
        {'frequency_group': label, 'member_count': buckets[label]}
        for _, label in FREQUENCY_BUCKETS
    ]


def top_workouts_by_calories(limit: int = 10) -> list:
    """Catalog workouts by calories burned, highest first; ties keep id order."""
    workouts = Workout.query.order_by(
        Workout.calories_burned.desc(), Workout.id.asc()
    ).limit(limit).all()
    return [w.to_dict() for w in workouts]


def current_members(now: datetime = None) -> list:
    """Members in the gym right now, earliest arrival first."""
    now = now or utcnow()
    present = []
    for record in attendance_service.currently_present():
        elapsed = max((now - record.check_in_time).total_seconds(), 0)
        present.append({
            'id': record.member_id,
            'record_id': record.id,
            'name': record.member.name,
            'check_in_time': isoformat(record.check_in_time),
            'minutes_in_gym': int(elapsed // 60),
        })
    return present


def all_stats(window_days: int = None, now: datetime = None) -> dict:
    now = now or utcnow()
    return {
        'signupsByMonth': signups_by_month(now),
        'usageByDayOfWeek': usage_by_day_of_week(window_days, now),
        'peakHours': peak_hours(window_days, now),
        'averageTime': average_session_duration(window_days, now),
        'topWorkouts': top_workouts_by_calories(),
        'currentMembers': current_members(now),
        'retentionRate': retention_rate(window_days, now),
        'attendanceFrequency': attendance_frequency(window_days, now),
    }
