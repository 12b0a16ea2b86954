"""Member signup, credential checks and profile updates."""

import math

from flask import current_app

from gymapp import db
from gymapp.errors import AuthError, ValidationError
from gymapp.models import Member
from gymapp.models.member import DIET_PLANS, FITNESS_GOALS, GENDERS
from gymapp.services import events
from gymapp.services.persistence import commit

MIN_PASSWORD_LENGTH = 6

# Profile fields a member may change on themselves, keyed by JSON name
PROFILE_FIELDS = {
    'name': 'name',
    'fullName': 'name',
    'email': 'email',
    'currentWeight': 'current_weight',
    'goalWeight': 'goal_weight',
    'height': 'height',
    'age': 'age',
    'gender': 'gender',
    'dietPlan': 'diet_plan',
    'fitnessGoals': 'fitness_goals',
}


def _clean_email(raw):
    email = (raw or '').strip().lower()
    if not email or '@' not in email:
        raise ValidationError('A valid email address is required')
    return email


def _clean_value(attr, value):
    if attr == 'name':
        value = (value or '').strip()
        if not value:
            raise ValidationError('Name is required')
        return value
    if attr == 'email':
        return _clean_email(value)
    if attr in ('current_weight', 'goal_weight', 'height'):
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValidationError(f"'{attr}' must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"'{attr}' must be a number")
        if not math.isfinite(number):
            raise ValidationError(f"'{attr}' must be a finite number")
        if number <= 0:
            raise ValidationError(f"'{attr}' must be greater than zero")
        return number
    if attr == 'age':
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValidationError("'age' must be a whole number")
        try:
            age = int(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("'age' must be a whole number")
        if age <= 0:
            raise ValidationError("'age' must be greater than zero")
        return age
    if attr == 'gender':
        if value is not None and value not in GENDERS:
            raise ValidationError('Invalid gender')
        return value
    if attr == 'diet_plan':
        if value not in DIET_PLANS:
            raise ValidationError('Invalid diet plan')
        return value
    if attr == 'fitness_goals':
        if not isinstance(value, list) or any(goal not in FITNESS_GOALS for goal in value):
            raise ValidationError('Invalid fitness goals')
        # Set semantics, keep first-seen order
        return list(dict.fromkeys(value))
    return value


def create_member(name, email, password, **profile) -> Member:
    """Sign up a new member on the basic plan."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    member = Member(
        name=_clean_value('name', name),
        email=_clean_email(email),
        membership_plan='basic',
        fitness_goals=[],
    )
    member.set_password(password)
    for key, value in profile.items():
        attr = PROFILE_FIELDS.get(key)
        if attr is None or attr in ('name', 'email'):
            continue
        setattr(member, attr, _clean_value(attr, value))

    db.session.add(member)
    commit('member signup', conflict_message='A member with that email already exists')

    current_app.logger.info(f"New member signed up: {member.id} ({member.email})")
    events.publish('members', events.INSERT, new=member.to_dict())
    return member


def authenticate(email, password) -> Member:
    member = Member.query.filter_by(email=(email or '').strip().lower()).first()
    if member is None or not member.check_password(password or ''):
        raise AuthError('Invalid email or password')
    return member


def update_profile(member, updates: dict) -> Member:
    """Apply allowed profile updates; any unknown key rejects the whole update."""
    invalid = [key for key in updates if key not in PROFILE_FIELDS]
    if invalid:
        raise ValidationError('Invalid updates!', detail={'fields': invalid})

    # Validate everything before touching the member
    cleaned = [(PROFILE_FIELDS[key], _clean_value(PROFILE_FIELDS[key], value))
               for key, value in updates.items()]
    for attr, value in cleaned:
        setattr(member, attr, value)
    commit('profile update', conflict_message='A member with that email already exists')

    current_app.logger.info(f"Member {member.id} updated profile: {', '.join(updates)}")
    events.publish('members', events.UPDATE, new=member.to_dict())
    return member
