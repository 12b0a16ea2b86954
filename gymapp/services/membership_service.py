"""
Membership lifecycle.

Tiers are totally ordered basic < premium < elite. A subscription sets the
plan and a one-year window starting now; upgrades change the plan in place
without touching the window; cancelling drops back to basic effective now.
"""

from datetime import datetime

from flask import current_app

from gymapp.errors import ValidationError, InvalidStateError
from gymapp.models.member import MEMBERSHIP_PLANS
from gymapp.services import events
from gymapp.services.persistence import commit
from gymapp.timeutils import utcnow, isoformat

UPGRADE_TARGETS = ('premium', 'elite')

MEMBERSHIP_PLAN_CATALOG = [
    {
        'name': 'Basic',
        'price': 29.99,
        'features': [
            'Access to gym equipment',
            'Basic workout plans',
            'Locker room access',
            'Free parking',
            '2 group classes per month'
        ]
    },
    {
        'name': 'Premium',
        'price': 49.99,
        'features': [
            'All Basic features',
            'Unlimited group classes',
            'Personal trainer (2 sessions/month)',
            'Nutrition consultation',
            'Access to swimming pool',
            'Guest passes (2/month)'
        ]
    },
    {
        'name': 'Elite',
        'price': 79.99,
        'features': [
            'All Premium features',
            'Unlimited personal training',
            'Priority class booking',
            'Spa access',
            'Unlimited guest passes',
            'Private locker',
            'Customized workout and nutrition plans'
        ]
    }
]


def list_plans() -> list:
    return MEMBERSHIP_PLAN_CATALOG


def tier_rank(plan: str) -> int:
    """Position of plan in the tier ordering (basic=0)."""
    return MEMBERSHIP_PLANS.index(plan)


def add_years(value: datetime, years: int) -> datetime:
    """Same calendar date `years` later; Feb 29 becomes Feb 28."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def status(member) -> dict:
    return {
        'plan': member.membership_plan,
        'startDate': isoformat(member.membership_start_date),
        'endDate': isoformat(member.membership_end_date),
    }


def subscribe(member, plan, now: datetime = None) -> dict:
    """Put member on plan for one year starting now."""
    if plan not in MEMBERSHIP_PLANS:
        raise ValidationError('Invalid membership plan')

    now = now or utcnow()
    member.membership_plan = plan
    member.membership_start_date = now
    member.membership_end_date = add_years(now, 1)
    commit('membership subscribe')

    current_app.logger.info(f"Member {member.id} subscribed to {plan} until {member.membership_end_date}")
    events.publish('members', events.UPDATE, new=member.to_dict())
    return status(member)


def upgrade(member, new_plan) -> dict:
    """
    Move member to a higher tier.

    The billing window is not reset; only the plan changes. A member already
    on the top tier gets InvalidStateError whatever new_plan is.
    """
    current = member.membership_plan if member.membership_plan in MEMBERSHIP_PLANS else 'basic'
    if tier_rank(current) == len(MEMBERSHIP_PLANS) - 1:
        raise InvalidStateError('Already on the highest tier')

    if new_plan not in UPGRADE_TARGETS:
        raise ValidationError('Invalid upgrade plan')

    member.membership_plan = new_plan
    commit('membership upgrade')

    current_app.logger.info(f"Member {member.id} upgraded from {current} to {new_plan}")
    events.publish('members', events.UPDATE, new=member.to_dict())
    return status(member)


def cancel(member, now: datetime = None) -> dict:
    """Cancel immediately: back to basic, window ends now."""
    now = now or utcnow()
    member.membership_plan = 'basic'
    member.membership_end_date = now
    commit('membership cancel')

    current_app.logger.info(f"Member {member.id} cancelled membership")
    events.publish('members', events.UPDATE, new=member.to_dict())
    return status(member)
