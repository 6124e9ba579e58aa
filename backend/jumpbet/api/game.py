from flask import Blueprint, jsonify

from jumpbet import get_session
from jumpbet.errors import PlayerNotFound

game = Blueprint('game', __name__)


@game.route('/state')
def get_state():
    return jsonify(get_session().public_state())


@game.route('/leaderboard')
def get_leaderboard():
    return jsonify(get_session().leaderboard())


@game.route('/players/<handle>')
def get_player(handle):
    try:
        state = get_session().snapshot(handle)
    except PlayerNotFound as exc:
        return jsonify({'error': exc.message, 'code': exc.code}), 404
    return jsonify(state)
