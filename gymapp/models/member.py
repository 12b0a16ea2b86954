from werkzeug.security import generate_password_hash, check_password_hash

from gymapp import db
from gymapp.timeutils import utcnow, isoformat


# Ordered lowest to highest tier
MEMBERSHIP_PLANS = ('basic', 'premium', 'elite')
DIET_PLANS = ('weight-loss', 'muscle-building', 'athletic-performance', 'health-wellness')
FITNESS_GOALS = ('weight-loss', 'muscle-gain', 'endurance', 'flexibility', 'strength')
GENDERS = ('male', 'female', 'other')


class Member(db.Model):
    """Registered gym member."""
    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=True)

    # Membership lifecycle
    membership_plan = db.Column(db.String(20), nullable=False, default='basic')  # basic, premium, elite
    membership_start_date = db.Column(db.DateTime, nullable=True)
    membership_end_date = db.Column(db.DateTime, nullable=True)

    # Fitness profile
    diet_plan = db.Column(db.String(30), nullable=False, default='health-wellness')
    fitness_goals = db.Column(db.JSON, nullable=False, default=list)
    current_weight = db.Column(db.Float, nullable=True)  # kg
    goal_weight = db.Column(db.Float, nullable=True)  # kg
    height = db.Column(db.Float, nullable=True)  # cm
    age = db.Column(db.Integer, nullable=True)
    gender = db.Column(db.String(10), nullable=True)  # male, female, other

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            'membership_end_date IS NULL OR membership_start_date IS NULL '
            'OR membership_end_date >= membership_start_date',
            name='membership_window_ordered'
        ),
    )

    # Relationships
    attendances = db.relationship('AttendanceRecord', backref='member', lazy='dynamic')
    workout_logs = db.relationship('WorkoutLogEntry', backref='member', lazy='dynamic',
                                   order_by='WorkoutLogEntry.id')

    def __repr__(self):
        return f'<Member {self.name}>'

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'membershipPlan': self.membership_plan,
            'membershipStartDate': isoformat(self.membership_start_date),
            'membershipEndDate': isoformat(self.membership_end_date),
            'dietPlan': self.diet_plan,
            'fitnessGoals': list(self.fitness_goals or []),
            'currentWeight': self.current_weight,
            'goalWeight': self.goal_weight,
            'height': self.height,
            'age': self.age,
            'gender': self.gender,
            'createdAt': isoformat(self.created_at),
        }
