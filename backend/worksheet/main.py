from datetime import datetime, timezone

from flask import Blueprint, Response, current_app, jsonify, request

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Math Worksheet Backend API',
        'endpoints': {
            '/health': 'Health check',
            '/api/questions': 'Get math questions data',
            '/api/scores': {
                'GET': 'Get high scores leaderboard',
                'POST': 'Submit new score',
            },
            '/api/stats': 'Get API usage statistics',
        },
        'version': '1.0.0',
        'status': 'active',
    })


@main.route('/health')
def health():
    return Response('OK', status=200, mimetype='text/plain')


@main.route('/debug')
def debug():
    # Registered always; the gate only lets it through when ENABLE_DEBUG_ROUTE is set
    if not current_app.config.get('ENABLE_DEBUG_ROUTE'):
        return jsonify({'error': 'Not Found'}), 404
    user_agent = request.headers.get('User-Agent') or 'none'
    return jsonify({
        'message': 'Debug info',
        'origin': request.headers.get('Origin') or request.headers.get('Referer') or 'none',
        'userAgent': user_agent[:100],
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'headers': {
            'origin': request.headers.get('Origin'),
            'referer': request.headers.get('Referer'),
            'accept': request.headers.get('Accept'),
            'contentType': request.headers.get('Content-Type'),
        },
    })
