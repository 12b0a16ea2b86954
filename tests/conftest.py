from datetime import datetime

import pytest

from gymapp import create_app, db
from gymapp.models import AttendanceRecord, Member


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_member(app):
    """Create and commit a member; created_at can be backdated."""
    counter = {'n': 0}

    def _make(name=None, created_at=None, **fields):
        counter['n'] += 1
        n = counter['n']
        member = Member(
            name=name or f'Member {n}',
            email=fields.pop('email', f'member{n}@example.com'),
            **fields
        )
        member.set_password('secret123')
        if created_at is not None:
            member.created_at = created_at
        db.session.add(member)
        db.session.commit()
        return member

    return _make


@pytest.fixture
def add_visit(app):
    """Insert an attendance record directly, bypassing the ledger."""
    def _add(member, check_in_time, check_out_time=None):
        record = AttendanceRecord(
            member_id=member.id,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
        )
        db.session.add(record)
        db.session.commit()
        return record

    return _add


@pytest.fixture
def auth_client(client):
    """Test client logged in as a freshly signed-up member."""
    response = client.post('/auth/signup', json={
        'name': 'Jordan Lee',
        'email': 'jordan@example.com',
        'password': 'secret123',
    })
    assert response.status_code == 201
    client.member_id = response.get_json()['member']['id']
    return client


@pytest.fixture
def fixed_now():
    # Monday
    return datetime(2026, 6, 15, 12, 0, 0)
