"""Membership plan catalog and subscription lifecycle routes."""

from flask import Blueprint, jsonify, g

from gymapp.routes.member import member_required, get_json_body
from gymapp.services import membership_service

memberships_bp = Blueprint('memberships', __name__, url_prefix='/memberships')


@memberships_bp.route('/plans')
def plans():
    """Static plan catalog; no login needed."""
    return jsonify(membership_service.list_plans())


@memberships_bp.route('/subscribe', methods=['POST'])
@member_required
def subscribe():
    body = get_json_body()
    membership = membership_service.subscribe(g.member, body.get('plan'))
    return jsonify({
        'message': 'Successfully subscribed to membership plan',
        'membership': membership,
    })


@memberships_bp.route('/status')
@member_required
def status():
    return jsonify(membership_service.status(g.member))


@memberships_bp.route('/cancel', methods=['POST'])
@member_required
def cancel():
    membership = membership_service.cancel(g.member)
    return jsonify({'message': 'Membership cancelled successfully', 'membership': membership})


@memberships_bp.route('/upgrade', methods=['POST'])
@member_required
def upgrade():
    body = get_json_body()
    membership = membership_service.upgrade(g.member, body.get('newPlan'))
    return jsonify({
        'message': 'Membership upgraded successfully',
        'newPlan': membership['plan'],
        'membership': membership,
    })
