from flask import Blueprint, jsonify, g

from gymapp.routes.member import member_required, get_json_body
from gymapp.services import workout_service

workouts_bp = Blueprint('workouts', __name__, url_prefix='/workouts')


@workouts_bp.route('/history')
@member_required
def history():
    return jsonify([e.to_dict() for e in workout_service.history(g.member)])


@workouts_bp.route('/log', methods=['POST'])
@member_required
def log():
    body = get_json_body()
    entry = workout_service.log_workout(
        g.member,
        workout_type=body.get('workoutType'),
        duration=body.get('duration'),
        exercises=body.get('exercises'),
        calories_burned=body.get('caloriesBurned'),
    )
    return jsonify({'message': 'Workout logged successfully', 'workout': entry.to_dict()}), 201


@workouts_bp.route('/stats')
@member_required
def stats():
    return jsonify(workout_service.workout_stats(g.member))


@workouts_bp.route('/recommendations')
@member_required
def recommendations():
    """Suggested workouts for each of the member's fitness goals."""
    return jsonify(workout_service.recommendations(g.member.fitness_goals))
