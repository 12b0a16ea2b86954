from gymapp import db
from gymapp.timeutils import utcnow, isoformat


class Workout(db.Model):
    """Catalog workout with its typical calorie burn."""
    __tablename__ = 'workouts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    difficulty = db.Column(db.String(20), nullable=True)  # beginner, intermediate, advanced
    duration = db.Column(db.Integer, nullable=True)  # minutes
    calories_burned = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<Workout {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'difficulty': self.difficulty,
            'duration': self.duration,
            'calories_burned': self.calories_burned,
        }


class WorkoutLogEntry(db.Model):
    """A workout a member performed. Append-only."""
    __tablename__ = 'workout_logs'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    workout_type = db.Column(db.String(100), nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=0)  # minutes
    calories_burned = db.Column(db.Integer, nullable=True)
    exercises = db.Column(db.JSON, nullable=False, default=list)  # [{name, sets, reps, weight}]

    def __repr__(self):
        return f'<WorkoutLogEntry member={self.member_id} {self.workout_type}>'

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'date': isoformat(self.date),
            'workoutType': self.workout_type,
            'duration': self.duration,
            'caloriesBurned': self.calories_burned,
            'exercises': list(self.exercises or []),
        }
