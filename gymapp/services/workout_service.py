"""
Member workout log, per-member workout statistics and goal-based
recommendations.
"""

import math
from datetime import datetime

from flask import current_app

from gymapp import db
from gymapp.errors import ValidationError
from gymapp.models import WorkoutLogEntry
from gymapp.services import events
from gymapp.services.persistence import commit
from gymapp.timeutils import utcnow, to_local

WORKOUT_RECOMMENDATIONS = {
    'weight-loss': [
        {
            'name': 'Cardio Blast',
            'duration': 45,
            'intensity': 'High',
            'exercises': [
                {'name': 'Running', 'duration': '20 minutes', 'intensity': 'Moderate'},
                {'name': 'Jump Rope', 'duration': '10 minutes', 'intensity': 'High'},
                {'name': 'Burpees', 'sets': 3, 'reps': 12, 'rest': '60 seconds'},
                {'name': 'Mountain Climbers', 'duration': '5 minutes', 'intensity': 'High'},
            ]
        },
        {
            'name': 'HIIT Circuit',
            'duration': 30,
            'intensity': 'High',
            'exercises': [
                {'name': 'Sprint Intervals', 'duration': '15 minutes', 'intensity': 'High'},
                {'name': 'Kettlebell Swings', 'sets': 4, 'reps': 15, 'rest': '45 seconds'},
                {'name': 'Box Jumps', 'sets': 3, 'reps': 10, 'rest': '60 seconds'},
                {'name': 'Plank to Push-up', 'sets': 3, 'reps': 8, 'rest': '45 seconds'},
            ]
        },
    ],
    'muscle-gain': [
        {
            'name': 'Upper Body Strength',
            'duration': 60,
            'intensity': 'Moderate',
            'exercises': [
                {'name': 'Bench Press', 'sets': 4, 'reps': 8, 'rest': '90 seconds'},
                {'name': 'Pull-ups', 'sets': 3, 'reps': 10, 'rest': '90 seconds'},
                {'name': 'Shoulder Press', 'sets': 3, 'reps': 12, 'rest': '60 seconds'},
                {'name': 'Tricep Extensions', 'sets': 3, 'reps': 12, 'rest': '60 seconds'},
            ]
        },
        {
            'name': 'Lower Body Power',
            'duration': 60,
            'intensity': 'Moderate',
            'exercises': [
                {'name': 'Squats', 'sets': 4, 'reps': 8, 'rest': '90 seconds'},
                {'name': 'Romanian Deadlifts', 'sets': 3, 'reps': 10, 'rest': '90 seconds'},
                {'name': 'Lunges', 'sets': 3, 'reps': 12, 'rest': '60 seconds'},
                {'name': 'Calf Raises', 'sets': 3, 'reps': 15, 'rest': '60 seconds'},
            ]
        },
    ],
    'endurance': [
        {
            'name': 'Long Distance Run',
            'duration': 60,
            'intensity': 'Moderate',
            'exercises': [
                {'name': 'Warm-up Run', 'duration': '10 minutes', 'intensity': 'Low'},
                {'name': 'Steady State Run', 'duration': '40 minutes', 'intensity': 'Moderate'},
                {'name': 'Cool-down Run', 'duration': '10 minutes', 'intensity': 'Low'},
            ]
        },
        {
            'name': 'Endurance Circuit',
            'duration': 45,
            'intensity': 'Moderate',
            'exercises': [
                {'name': 'Rowing', 'duration': '15 minutes', 'intensity': 'Moderate'},
                {'name': 'Cycling', 'duration': '15 minutes', 'intensity': 'Moderate'},
                {'name': 'Swimming', 'duration': '15 minutes', 'intensity': 'Moderate'},
            ]
        },
    ],
    'flexibility': [
        {
            'name': 'Yoga Flow',
            'duration': 45,
            'intensity': 'Low',
            'exercises': [
                {'name': 'Sun Salutations', 'duration': '10 minutes'},
                {'name': 'Standing Poses', 'duration': '15 minutes'},
                {'name': 'Seated Poses', 'duration': '10 minutes'},
                {'name': 'Cool-down Stretches', 'duration': '10 minutes'},
            ]
        },
        {
            'name': 'Stretching Routine',
            'duration': 30,
            'intensity': 'Low',
            'exercises': [
                {'name': 'Dynamic Stretches', 'duration': '10 minutes'},
                {'name': 'Static Stretches', 'duration': '15 minutes'},
                {'name': 'Cool-down', 'duration': '5 minutes'},
            ]
        },
    ],
    'strength': [
        {
            'name': 'Full Body Strength',
            'duration': 60,
            'intensity': 'High',
            'exercises': [
                {'name': 'Deadlifts', 'sets': 4, 'reps': 6, 'rest': '120 seconds'},
                {'name': 'Squats', 'sets': 4, 'reps': 8, 'rest': '120 seconds'},
                {'name': 'Bench Press', 'sets': 4, 'reps': 8, 'rest': '120 seconds'},
                {'name': 'Pull-ups', 'sets': 3, 'reps': 8, 'rest': '90 seconds'},
            ]
        },
        {
            'name': 'Power Lifting',
            'duration': 75,
            'intensity': 'High',
            'exercises': [
                {'name': 'Squats', 'sets': 5, 'reps': 5, 'rest': '180 seconds'},
                {'name': 'Bench Press', 'sets': 5, 'reps': 5, 'rest': '180 seconds'},
                {'name': 'Deadlifts', 'sets': 5, 'reps': 5, 'rest': '180 seconds'},
            ]
        },
    ],
}


def non_negative_int(raw, field, required=True):
    """Whole number >= 0 from a JSON value; floats are truncated."""
    if raw is None:
        if required:
            raise ValidationError(f"'{field}' is required")
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"'{field}' must be a number")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise ValidationError(f"'{field}' must be a finite number")
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"'{field}' must be a number")
    if value < 0:
        raise ValidationError(f"'{field}' must not be negative")
    return value


def _clean_exercises(exercises):
    if exercises is None:
        return []
    if not isinstance(exercises, list):
        raise ValidationError("'exercises' must be a list")

    cleaned = []
    for i, exercise in enumerate(exercises):
        if not isinstance(exercise, dict) or not exercise.get('name'):
            raise ValidationError(f"Exercise {i} needs a name")
        cleaned.append({
            'name': str(exercise['name']),
            'sets': non_negative_int(exercise.get('sets'), 'sets', required=False),
            'reps': non_negative_int(exercise.get('reps'), 'reps', required=False),
            'weight': exercise.get('weight'),
        })
    return cleaned


def log_workout(member, workout_type, duration, exercises=None, calories_burned=None,
                logged_at: datetime = None) -> WorkoutLogEntry:
    """Append a workout to the member's history."""
    if not workout_type or not isinstance(workout_type, str):
        raise ValidationError("'workoutType' is required")

    entry = WorkoutLogEntry(
        member_id=member.id,
        date=logged_at or utcnow(),
        workout_type=workout_type.strip(),
        duration=non_negative_int(duration, 'duration'),
        calories_burned=non_negative_int(calories_burned, 'caloriesBurned', required=False),
        exercises=_clean_exercises(exercises),
    )
    db.session.add(entry)
    commit('workout log')

    current_app.logger.info(f"Member {member.id} logged workout {entry.workout_type} ({entry.duration} min)")
    events.publish('workout_logs', events.INSERT, new=entry.to_dict())
    return entry


def history(member) -> list:
    """Workout history, newest first."""
    return WorkoutLogEntry.query.filter_by(member_id=member.id).order_by(
        WorkoutLogEntry.date.desc(), WorkoutLogEntry.id.desc()
    ).all()


def _previous_months(now: datetime, count: int) -> list:
    """'YYYY-MM' for this month and the count-1 months before it."""
    year, month = now.year, now.month
    months = []
    for _ in range(count):
        months.append(f'{year:04d}-{month:02d}')
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return months


def workout_stats(member, now: datetime = None) -> dict:
    entries = history(member)
    now = to_local(now or utcnow())

    total_duration = sum(e.duration or 0 for e in entries)
    by_type = {}
    for entry in entries:
        by_type[entry.workout_type] = by_type.get(entry.workout_type, 0) + 1

    monthly = {}
    for month in _previous_months(now, 6):
        month_entries = [e for e in entries if to_local(e.date).strftime('%Y-%m') == month]
        month_duration = sum(e.duration or 0 for e in month_entries)
        monthly[month] = {
            'totalWorkouts': len(month_entries),
            'totalDuration': month_duration,
            'averageDuration': month_duration / len(month_entries) if month_entries else 0,
        }

    return {
        'totalWorkouts': len(entries),
        'totalDuration': total_duration,
        'averageDuration': total_duration / len(entries) if entries else 0,
        'workoutsByType': by_type,
        'recentWorkouts': [e.to_dict() for e in entries[:5]],
        'monthlyProgress': monthly,
    }


def recommendations(fitness_goals) -> list:
    return [
        {'goal': goal, 'workouts': WORKOUT_RECOMMENDATIONS.get(goal, [])}
        for goal in (fitness_goals or [])
    ]
