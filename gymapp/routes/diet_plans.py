"""Diet plan catalog, selection, daily meal plan and BMI calculator routes."""

from flask import Blueprint, jsonify, g

from gymapp.routes.member import member_required, get_json_body
from gymapp.services import diet_service, nutrition

diet_plans_bp = Blueprint('diet_plans', __name__, url_prefix='/diet-plans')


@diet_plans_bp.route('/plans')
def plans():
    return jsonify(diet_service.list_plans())


@diet_plans_bp.route('/select', methods=['POST'])
@member_required
def select():
    body = get_json_body()
    diet_plan = diet_service.select_plan(g.member, body.get('plan'))
    return jsonify({'message': 'Diet plan selected successfully', 'dietPlan': diet_plan})


@diet_plans_bp.route('/current')
@member_required
def current():
    return jsonify({'dietPlan': diet_service.current_plan(g.member)})


@diet_plans_bp.route('/daily-plan')
@member_required
def daily_plan():
    """Meal plan for the member's stored diet category."""
    meal_plan = diet_service.daily_plan(g.member.diet_plan)
    return jsonify(meal_plan)


@diet_plans_bp.route('/bmi', methods=['POST'])
def bmi():
    """
    BMI calculator.

    Body: weight (kg), height (cm), age, gender. Returns the BMI category,
    its recommendation block and a calorie target.
    """
    body = get_json_body()
    result = nutrition.recommend(
        body.get('weight'),
        body.get('height'),
        body.get('age'),
        body.get('gender'),
    )
    return jsonify(result)
