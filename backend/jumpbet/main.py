from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Jump bet server is running',
        'namespace': current_app.config.get('SOCKETIO_NAMESPACE', '/ws'),
    })


@main.route('/health')
def health():
    return jsonify({'status': 'ok'})
