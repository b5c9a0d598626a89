from flask_socketio import emit

from worksheet import socketio
from worksheet.state import get_state


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_get_scores(data=None):
    limit = (data or {}).get('limit')
    try:
        limit = int(limit) if limit is not None else None
    except (TypeError, ValueError):
        emit('error', {'message': 'limit must be an integer'})
        return
    emit('scores', {'highScores': get_state().leaderboard.top(limit)})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO handlers on the '/ws' namespace.

    The server also pushes ``scores_updated`` to every client on '/ws'
    whenever a score is accepted.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('get_scores', handle_get_scores, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
