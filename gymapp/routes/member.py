"""
Member authentication and profile routes.

Members log in with email and password; the member id is kept in the signed
Flask session cookie. ``member_required`` resolves the member once per
request into ``g.member`` and views pass it explicitly to the services.
"""

from functools import wraps
from flask import Blueprint, request, session, jsonify, g, current_app

from gymapp import db
from gymapp.errors import AuthError, ValidationError
from gymapp.models import Member
from gymapp.services import member_service

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
member_bp = Blueprint('member', __name__, url_prefix='/members')


# ============== AUTHENTICATION ==============

def get_json_body():
    """Request JSON as a dict; missing body is an empty dict."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def get_current_member():
    """Get the currently logged-in member."""
    member_id = session.get('member_id')
    if member_id:
        return db.session.get(Member, member_id)
    return None


def member_required(f):
    """Decorator to require member authentication; sets g.member."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        member = get_current_member()
        if member is None:
            # Stale session for a member that no longer exists
            session.pop('member_id', None)
            raise AuthError('Not logged in')
        g.member = member
        return f(*args, **kwargs)
    return decorated_function


def set_member_session(member):
    """Set session variables for a logged-in member."""
    session['member_id'] = member.id
    session.permanent = True
    current_app.logger.info(f"set_member_session: member={member.id}")


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Create a member account and log it in."""
    body = get_json_body()
    profile = {k: v for k, v in body.items() if k not in ('name', 'fullName', 'email', 'password')}
    member = member_service.create_member(
        name=body.get('name') or body.get('fullName'),
        email=body.get('email'),
        password=body.get('password'),
        **profile
    )
    set_member_session(member)
    return jsonify({'success': True, 'member': member.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    body = get_json_body()
    member = member_service.authenticate(body.get('email'), body.get('password'))
    set_member_session(member)
    return jsonify({'success': True, 'member': member.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Log out member."""
    session.pop('member_id', None)
    return jsonify({'success': True})


# ============== PROFILE ==============

@member_bp.route('/me')
@member_required
def me():
    return jsonify(g.member.to_dict())


@member_bp.route('/me', methods=['PATCH'])
@member_required
def update_me():
    member = member_service.update_profile(g.member, get_json_body())
    return jsonify(member.to_dict())
