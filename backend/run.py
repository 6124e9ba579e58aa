from jumpbet import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev.
    # The reloader forks a second process, which would run a second round clock.
    socketio.run(app, debug=True, use_reloader=False)
