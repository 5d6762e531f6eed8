from blobverse import socketio


def _named(received, name):
    return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]


def _send(sio_client, **frame):
    sio_client.emit('message', frame)


def test_socket_connect_greets_client(flask_app):
    sio_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    assert sio_client.is_connected()
    received = sio_client.get_received()
    assert any(pkt['name'] == 'CONNECTED' for pkt in received)
    assert flask_app.extensions['battle_server'].stats()['connections'] == 1
    sio_client.disconnect()


def test_ping_pong(connect):
    sio_client = connect()
    _send(sio_client, type='PING')
    assert [pkt['name'] for pkt in sio_client.get_received()] == ['PONG']


def test_get_queue_replies_to_sender_only(connect):
    alice, bob = connect(), connect()
    _send(alice, type='JOIN_QUEUE', userId='u1', username='Alice')
    alice.get_received()
    bob.get_received()

    _send(bob, type='GET_QUEUE')
    assert _named(bob.get_received(), 'QUEUE_UPDATE') == [
        {'queue': [{'userId': 'u1', 'username': 'Alice', 'appearance': {}, 'evolutionLevel': None}]}
    ]
    assert alice.get_received() == []


def test_queue_pairing_sends_match_found(connect, battle_server):
    alice, bob, watcher = connect(), connect(), connect()
    _send(alice, type='JOIN_QUEUE', userId='u1', username='Alice', appearance={'type': 'fire'})
    # every client sees the queue change
    assert _named(watcher.get_received(), 'QUEUE_UPDATE')[-1]['queue'][0]['userId'] == 'u1'

    _send(bob, type='JOIN_QUEUE', userId='u2', username='Bob', appearance={'type': 'water'})
    alice_match = _named(alice.get_received(), 'MATCH_FOUND')
    bob_match = _named(bob.get_received(), 'MATCH_FOUND')
    assert alice_match[0]['opponentName'] == 'Bob'
    assert alice_match[0]['opponentAppearance'] == {'type': 'water'}
    assert bob_match[0]['opponentName'] == 'Alice'
    assert alice_match[0]['sessionId'] == bob_match[0]['sessionId']
    assert len(battle_server.queue) == 0
    assert _named(watcher.get_received(), 'QUEUE_UPDATE')[-1] == {'queue': []}
    assert _named(watcher.get_received(), 'MATCH_FOUND') == []


def test_join_code_flow_and_started_conflict(connect):
    alice, bob, carol = connect(), connect(), connect()
    _send(alice, type='CREATE_BATTLE', userId='u1', code='ABC123', username='Alice')
    assert _named(alice.get_received(), 'BATTLE_CODE_GENERATED') == [{'code': 'ABC123', 'sessionId': 'ABC123'}]

    _send(bob, type='JOIN_BATTLE', userId='u2', code='ABC123', username='Bob')
    assert _named(alice.get_received(), 'MATCH_FOUND')[0]['opponentName'] == 'Bob'
    assert _named(bob.get_received(), 'MATCH_FOUND')[0]['opponentName'] == 'Alice'

    _send(carol, type='JOIN_BATTLE', userId='u3', code='ABC123', username='Carol')
    assert _named(carol.get_received(), 'ERROR') == [{'error': 'Battle already started'}]
    assert alice.get_received() == [] and bob.get_received() == []


def test_join_unknown_code_errors(connect):
    bob = connect()
    _send(bob, type='JOIN_BATTLE', userId='u2', code='ZZZ999')
    assert _named(bob.get_received(), 'ERROR') == [{'error': 'Invalid battle code'}]


def test_create_without_code_generates_one(connect):
    alice = connect()
    _send(alice, type='CREATE_BATTLE', userId='u1')
    reply = _named(alice.get_received(), 'BATTLE_CODE_GENERATED')[0]
    assert len(reply['code']) == 6
    assert reply['sessionId'] == reply['code']


def _paired(connect):
    alice, bob = connect(), connect()
    _send(alice, type='JOIN_QUEUE', userId='u1', username='Alice')
    _send(bob, type='JOIN_QUEUE', userId='u2', username='Bob')
    session_id = _named(alice.get_received(), 'MATCH_FOUND')[0]['sessionId']
    bob.get_received()
    return alice, bob, session_id


def test_round_win_reported_by_winner(connect):
    alice, bob, session_id = _paired(connect)
    _send(alice, type='SEND_BATTLE_MESSAGE', sessionId=session_id, userId='u1',
          message={'gameOver': True, 'winner': 'A'})
    win_state = {'slotAWins': 1, 'slotBWins': 0}
    assert _named(alice.get_received(), 'BATTLE_WIN_STATE') == [win_state]
    bob_received = bob.get_received()
    assert _named(bob_received, 'BATTLE_WIN_STATE') == [win_state]
    assert _named(bob_received, 'BATTLE_MESSAGE') == [
        {'message': {'gameOver': True, 'winner': 'A'}, 'senderId': 'u1'}
    ]

    # slot B claiming a win for slot A changes nothing
    _send(bob, type='SEND_BATTLE_MESSAGE', sessionId=session_id, userId='u2',
          message={'gameOver': True, 'winner': 'A'})
    assert _named(alice.get_received(), 'BATTLE_WIN_STATE') == []
    assert bob.get_received() == []


def test_leave_battle_notifies_opponent(connect, battle_server):
    alice, bob, session_id = _paired(connect)
    _send(alice, type='LEAVE_BATTLE', sessionId=session_id, userId='u1')
    assert [pkt['name'] for pkt in bob.get_received()] == ['OPPONENT_DISCONNECTED']
    assert session_id not in battle_server.sessions

    _send(bob, type='SEND_BATTLE_MESSAGE', sessionId=session_id, userId='u2', message={'x': 1})
    assert _named(bob.get_received(), 'ERROR') == [{'error': 'Battle not found'}]


def test_disconnect_ends_session(connect, battle_server):
    alice, bob, session_id = _paired(connect)
    alice.disconnect()
    assert [pkt['name'] for pkt in bob.get_received()] == ['OPPONENT_DISCONNECTED']
    assert len(battle_server.sessions) == 0


def test_disconnect_leaves_queue(connect, battle_server):
    alice, watcher = connect(), connect()
    _send(alice, type='JOIN_QUEUE', userId='u1')
    watcher.get_received()
    alice.disconnect()
    assert _named(watcher.get_received(), 'QUEUE_UPDATE') == [{'queue': []}]
    assert len(battle_server.queue) == 0


def test_unknown_event_is_ignored(connect):
    sio_client = connect()
    _send(sio_client, type='TELEPORT', userId='u1')
    sio_client.emit('message', 'not a frame')
    assert sio_client.get_received() == []
    assert sio_client.is_connected()
