# Import all models here so they're registered with SQLAlchemy
from gymapp.models.member import Member
from gymapp.models.attendance import AttendanceRecord
from gymapp.models.workout import Workout, WorkoutLogEntry

__all__ = ['Member', 'AttendanceRecord', 'Workout', 'WorkoutLogEntry']
