from conftest import ALL_CORRECT


def test_socket_connect_and_get_scores(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)

    sio_client.emit('get_scores', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    scores = [pkt for pkt in received if pkt['name'] == 'scores']
    assert scores and scores[0]['args'][0] == {'highScores': []}


def test_submission_broadcasts_scores_updated(sio_client, client):
    sio_client.get_received('/ws')  # flush
    res = client.post('/api/scores', json={'name': 'Ann', 'userAnswers': ALL_CORRECT})
    assert res.status_code == 200

    events = sio_client.get_received('/ws')
    updates = [e for e in events if e['name'] == 'scores_updated']
    assert updates
    assert updates[-1]['args'][0]['highScores'][0] == res.get_json()['highScores'][0]


def test_ping_pong(sio_client):
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)
