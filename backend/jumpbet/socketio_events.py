from flask import request
from flask_socketio import emit

from jumpbet import get_session, socketio
from jumpbet.errors import GameError

NICKNAME_MAX_LEN = 32


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def clean_nickname(raw, sid: str) -> str:
    if isinstance(raw, dict):
        raw = raw.get('nickname')
    nickname = str(raw).strip() if raw is not None else ''
    if not nickname:
        nickname = f"Player-{sid[:4]}"
    return nickname[:NICKNAME_MAX_LEN]


def handle_connect():
    emit('connected', {'message': 'Connected', 'sid': _get_sid()})


def handle_disconnect(*args):
    get_session().leave(_get_sid())


def handle_register_player(data=None):
    sid = _get_sid()
    try:
        state = get_session().join(sid, clean_nickname(data, sid))
    except GameError as exc:
        emit('error', exc.to_dict())
        return
    emit('gameState', state)


def handle_get_state(*args):
    try:
        return get_session().snapshot(_get_sid())
    except GameError as exc:
        emit('error', exc.to_dict())
        return {'success': False, 'error': exc.message, 'code': exc.code}


def handle_place_bet(*args):
    try:
        result = get_session().place_bet(_get_sid())
    except GameError as exc:
        emit('error', exc.to_dict())
        return {'success': False, 'error': exc.message, 'code': exc.code}
    return dict(success=True, **result)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the game namespace.

    The camelCase names are the ones the browser client sends.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for name in ('register_player', 'registerPlayer'):
        socketio.on_event(name, handle_register_player, namespace=namespace)
    for name in ('get_state', 'getInitialState'):
        socketio.on_event(name, handle_get_state, namespace=namespace)
    for name in ('place_bet', 'placeBet'):
        socketio.on_event(name, handle_place_bet, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
