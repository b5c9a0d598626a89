from worksheet import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so /ws websockets work in dev
    socketio.run(
        app,
        host=app.config['HOST'],
        port=app.config['PORT'],
        debug=app.config.get('DEBUG', False),
        allow_unsafe_werkzeug=True,
    )
