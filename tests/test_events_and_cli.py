from datetime import datetime

import pytest

from gymapp.models import Workout
from gymapp.seed_workouts import INITIAL_WORKOUTS
from gymapp.services import events, membership_service


@pytest.fixture
def recorder():
    """Subscribe to an entity for the length of a test."""
    subscriptions = []

    def _subscribe(entity, event_type='*'):
        received = []
        receiver = events.subscribe(entity, received.append, event_type)
        subscriptions.append((entity, receiver))
        return received

    yield _subscribe
    for entity, receiver in subscriptions:
        events.unsubscribe(entity, receiver)


def test_subscribers_only_see_their_entity(app, recorder):
    attendance = recorder('attendance')
    workouts = recorder('workouts')

    events.publish('workouts', events.INSERT, new={'id': 1})

    assert attendance == []
    assert [e.new for e in workouts] == [{'id': 1}]


def test_event_type_filter(app, recorder):
    deletes = recorder('workouts', events.DELETE)

    events.publish('workouts', events.INSERT, new={'id': 1})
    events.publish('workouts', events.DELETE, old={'id': 1})

    assert [e.event_type for e in deletes] == ['DELETE']
    assert deletes[0].old == {'id': 1}


def test_unknown_event_type_is_rejected():
    with pytest.raises(ValueError):
        events.subscribe('workouts', print, 'TRUNCATE')


def test_unsubscribe_stops_delivery(app):
    received = []
    receiver = events.subscribe('members', received.append)
    events.unsubscribe('members', receiver)

    events.publish('members', events.UPDATE, new={'id': 7})

    assert received == []


def test_membership_changes_are_published(make_member, recorder):
    received = recorder('members', events.UPDATE)
    member = make_member()

    membership_service.subscribe(member, 'premium', now=datetime(2026, 6, 15, 9))
    membership_service.cancel(member, now=datetime(2026, 7, 1, 9))

    assert [e.new['membershipPlan'] for e in received] == ['premium', 'basic']


def test_seed_workouts_command_is_idempotent(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=['seed-workouts'])
    second = runner.invoke(args=['seed-workouts'])

    count = len(INITIAL_WORKOUTS)
    assert f'Workouts added: {count}, skipped: 0, total: {count}' in first.output
    assert f'Workouts added: 0, skipped: {count}, total: {count}' in second.output
    assert Workout.query.count() == count
