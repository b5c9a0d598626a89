from flask import Blueprint, current_app, jsonify, request

from worksheet import socketio
from worksheet.state import get_state

scores = Blueprint('scores', __name__)


@scores.route('/questions', methods=['GET'])
def list_questions():
    questions = get_state().bank.list()
    current_app.logger.info(f"[questions] returning {len(questions)} questions")
    return jsonify(questions)


@scores.route('/scores', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    result = get_state().scoring.submit(data.get('name'), data.get('userAnswers'))
    current_app.logger.info(f"[score] name={result.entry.name} score={result.score}/{result.total}")

    socketio.emit('scores_updated', {'highScores': result.high_scores}, namespace='/ws')
    return jsonify(result.to_dict()), 200


@scores.route('/scores', methods=['GET'])
def list_scores():
    return jsonify(get_state().leaderboard.top())


@scores.route('/stats', methods=['GET'])
def stats():
    status = get_state().quota.status()
    return jsonify({
        'dailyRequests': status.count,
        'limit': status.limit,
        'remaining': status.remaining,
        'reset': status.reset,
    })
