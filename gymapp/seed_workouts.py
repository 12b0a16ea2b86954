"""Seed data for the workout catalog, plus the flask CLI commands that load it."""
import click

from gymapp import db
from gymapp.models.workout import Workout


INITIAL_WORKOUTS = [
    # (name, difficulty, duration minutes, calories burned)
    ('HIIT Circuit', 'advanced', 30, 520),
    ('Powerlifting', 'advanced', 75, 480),
    ('CrossFit WOD', 'advanced', 45, 450),
    ('Spin Class', 'intermediate', 45, 410),
    ('Bootcamp', 'intermediate', 50, 390),
    ('Boxing', 'intermediate', 45, 370),
    ('Bodybuilding', 'intermediate', 60, 340),
    ('Yoga Flow', 'beginner', 45, 220),
]


def seed_workouts():
    """Add catalog workouts that don't exist yet. Returns summary."""
    added = 0
    skipped = 0

    for name, difficulty, duration, calories in INITIAL_WORKOUTS:
        existing = Workout.query.filter_by(name=name).first()
        if not existing:
            workout = Workout(name=name, difficulty=difficulty, duration=duration,
                              calories_burned=calories)
            db.session.add(workout)
            added += 1
        else:
            skipped += 1

    db.session.commit()
    total = Workout.query.count()

    return {
        'added': added,
        'skipped': skipped,
        'total': total
    }


def register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Create tables directly (local development without migrations)."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('seed-workouts')
    def seed_workouts_command():
        """Load the default workout catalog."""
        result = seed_workouts()
        click.echo(f"Workouts added: {result['added']}, skipped: {result['skipped']}, total: {result['total']}")
