from gymapp import db
from gymapp.timeutils import isoformat


class AttendanceRecord(db.Model):
    """One check-in/check-out interval for a member."""
    __tablename__ = 'attendance'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    check_in_time = db.Column(db.DateTime, nullable=False, index=True)
    check_out_time = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        # At most one open record per member: a member cannot be in the gym twice
        db.Index(
            'uq_attendance_open_per_member',
            'member_id',
            unique=True,
            sqlite_where=db.text('check_out_time IS NULL'),
            postgresql_where=db.text('check_out_time IS NULL'),
        ),
        db.CheckConstraint(
            'check_out_time IS NULL OR check_out_time > check_in_time',
            name='check_out_after_check_in'
        ),
    )

    def __repr__(self):
        return f'<AttendanceRecord member={self.member_id} in={self.check_in_time} out={self.check_out_time}>'

    @property
    def is_open(self):
        return self.check_out_time is None

    def to_dict(self):
        from gymapp.services.attendance_service import duration_minutes, format_duration
        return {
            'id': self.id,
            'member_id': self.member_id,
            'check_in_time': isoformat(self.check_in_time),
            'check_out_time': isoformat(self.check_out_time),
            'duration_minutes': duration_minutes(self),
            'duration': format_duration(self),
        }
