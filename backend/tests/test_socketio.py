def _named(events, name):
    return [e['args'][0] for e in events if e['name'] == name]


def test_socket_connect(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_register_and_get_state(sio_client):
    sio_client.get_received('/ws')  # flush
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    received = sio_client.get_received('/ws')
    state = _named(received, 'gameState')[0]
    assert state['nickname'] == 'Alice'
    assert state['balance'] == '10'
    assert state['gameHistory'] == []
    assert _named(received, 'leaderboard')[0][0]['nickname'] == 'Alice'

    ack = sio_client.emit('getInitialState', namespace='/ws', callback=True)
    assert ack['nickname'] == 'Alice'
    assert ack['roundId'] == state['roundId']


def test_blank_nickname_gets_default(sio_client):
    sio_client.emit('register_player', {'nickname': '   '}, namespace='/ws')
    state = _named(sio_client.get_received('/ws'), 'gameState')[0]
    assert state['nickname'].startswith('Player-')


def test_duplicate_register_reports_error(sio_client):
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    sio_client.get_received('/ws')
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    errors = _named(sio_client.get_received('/ws'), 'error')
    assert errors[0]['code'] == 'duplicate_player'


def test_place_bet_and_settle(flask_app, sio_client):
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    sio_client.get_received('/ws')

    ack = sio_client.emit('placeBet', namespace='/ws', callback=True)
    assert ack['success'] is True
    assert ack['newBalance'] == '0'
    assert ack['openBetCount'] == 1

    again = sio_client.emit('placeBet', namespace='/ws', callback=True)
    assert again['success'] is False
    assert again['code'] == 'duplicate_bet'

    sio_client.get_received('/ws')
    flask_app.extensions['jumpbet'].tick()
    received = sio_client.get_received('/ws')
    result = _named(received, 'roundResult')[0]
    assert result['newBalance'] == ('20' if result['win'] else '0')
    assert result['stats'] == ({'wins': 1, 'losses': 0} if result['win'] else {'wins': 0, 'losses': 1})
    state = _named(received, 'gameState')[-1]
    assert state['openBetCount'] == 0
    assert state['roundId'] != ack['roundId']


def test_get_state_before_register(sio_client):
    sio_client.get_received('/ws')
    ack = sio_client.emit('get_state', namespace='/ws', callback=True)
    assert ack['success'] is False
    assert ack['code'] == 'player_not_found'
    errors = _named(sio_client.get_received('/ws'), 'error')
    assert errors[0]['code'] == 'player_not_found'


def test_disconnect_removes_player(flask_app, sio_client):
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    session = flask_app.extensions['jumpbet']
    assert session.public_state()['playerCount'] == 1
    sio_client.disconnect(namespace='/ws')
    assert session.public_state()['playerCount'] == 0


def test_other_players_see_failed_request_only_for_themselves(flask_app, sio_client):
    from jumpbet import socketio as _sio
    other = _sio.test_client(flask_app, namespace='/ws')
    sio_client.emit('registerPlayer', 'Alice', namespace='/ws')
    other.emit('registerPlayer', 'Bob', namespace='/ws')
    other.get_received('/ws')

    sio_client.emit('placeBet', namespace='/ws', callback=True)
    sio_client.emit('placeBet', namespace='/ws', callback=True)

    assert _named(other.get_received('/ws'), 'error') == []
    other.disconnect(namespace='/ws')


def test_ping(sio_client):
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    assert _named(sio_client.get_received('/ws'), 'pong') == [{'n': 1}]
