import pytest


def _tick(client, count, delta=0.1):
    res = None
    for _ in range(count):
        res = client.post('/api/clock/tick', json={'delta': delta})
    return res.get_json()


def test_index_and_health(client):
    assert client.get('/').status_code == 200
    res = client.get('/health')
    assert res.get_json() == {'status': 'ok', 'phase': 'menu'}


def test_state_in_menu(client):
    res = client.get('/api/clock/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['phase'] == 'menu'
    assert state['player_times'] == []
    assert state['settings']['player_count'] == 2
    assert len(state['players']) == 2


def test_update_settings_clamps(client):
    res = client.patch('/api/clock/settings', json={'playerCount': 12, 'max_time': 5, 'jumpInAmount': 0})
    assert res.status_code == 200
    assert res.get_json() == {'invulnerability_period': 3, 'jump_in_amount': 1, 'max_time': 10, 'player_count': 8}
    assert client.get('/api/clock/settings').get_json()['player_count'] == 8


def test_update_settings_rejects_non_numbers(client):
    res = client.post('/api/clock/settings', json={'player_count': 'three'})
    assert res.status_code == 400
    assert 'player_count' in res.get_json()['error']
    assert client.get('/api/clock/settings').get_json()['player_count'] == 2


def test_start_uses_latest_settings(client):
    client.post('/api/clock/settings', json={'player_count': 3, 'max_time': 10, 'invulnerability_period': 2, 'jump_in_amount': 1})
    started = client.post('/api/clock/start').get_json()
    assert started['ok'] is True
    assert started['phase'] == 'playing'
    assert started['player_times'] == [10, 10, 10]
    assert started['jump_in_counts'] == [1, 1, 1]
    assert started['grace_period_active'] is True
    assert started['grace_period_remaining'] == 2


def test_scenario_over_http(client):
    client.post('/api/clock/settings', json={'player_count': 3, 'max_time': 10, 'invulnerability_period': 2, 'jump_in_amount': 1})
    client.post('/api/clock/start')
    state = _tick(client, 20)
    assert state['grace_period_active'] is False
    assert state['player_times'] == pytest.approx([8, 10, 10])
    state = _tick(client, 80)
    assert state['player_times'] == [0, 10, 10]
    assert state['current_speaker'] == 2
    assert state['grace_period_remaining'] == 2
    res = client.post('/api/clock/jump-in', json={'player_index': 1})
    assert res.status_code == 200
    rejected = res.get_json()
    assert rejected['ok'] is False
    assert rejected['current_speaker'] == 2


def test_pause_and_rejected_operations(client):
    # Operations outside their phase are reported, not errors
    paused = client.post('/api/clock/pause').get_json()
    assert paused['ok'] is False
    assert paused['phase'] == 'menu'
    client.post('/api/clock/start')
    paused = client.post('/api/clock/pause').get_json()
    assert paused['ok'] is True
    assert paused['phase'] == 'paused'
    ticked = client.post('/api/clock/tick').get_json()
    assert ticked['ok'] is False
    assert ticked['player_times'] == [60, 60]
    assert client.post('/api/clock/pause').get_json()['phase'] == 'playing'


def test_finish_grace_and_jump_in(client):
    client.post('/api/clock/start')
    ended = client.post('/api/clock/grace/end').get_json()
    assert ended['ok'] is True
    assert ended['grace_period_active'] is False
    assert [p['can_jump_in'] for p in ended['players']] == [False, True]
    jumped = client.post('/api/clock/jump-in', json={'player_index': 1}).get_json()
    assert jumped['ok'] is True
    assert jumped['current_speaker'] == 1
    assert jumped['jump_in_counts'] == [3, 2]
    finished = client.post('/api/clock/finish').get_json()
    assert finished['ok'] is True
    assert finished['current_speaker'] == 1
    assert finished['grace_period_active'] is False
    finished = client.post('/api/clock/finish').get_json()
    assert finished['current_speaker'] == 0


def test_select_region(client):
    client.post('/api/clock/settings', json={'player_count': 4})
    client.post('/api/clock/start')
    own = client.post('/api/clock/select', json={'player_index': 0}).get_json()
    assert own['ok'] is True
    assert own['grace_period_active'] is False
    other = client.post('/api/clock/select', json={'playerIndex': 2}).get_json()
    assert other['ok'] is True
    assert other['current_speaker'] == 2


def test_player_index_required(client):
    client.post('/api/clock/start')
    assert client.post('/api/clock/jump-in', json={}).status_code == 400
    assert client.post('/api/clock/select', json={'player_index': 'x'}).status_code == 400
    assert client.post('/api/clock/jump-in').status_code == 400


def test_tick_rejects_bad_delta(client):
    client.post('/api/clock/start')
    assert client.post('/api/clock/tick', json={'delta': 'soon'}).status_code == 400
    ignored = client.post('/api/clock/tick', json={'delta': 0}).get_json()
    assert ignored['ok'] is False


def test_reset_and_exit(client):
    client.post('/api/clock/start')
    reset = client.post('/api/clock/reset').get_json()
    assert reset['ok'] is True
    assert reset['phase'] == 'menu'
    assert reset['player_times'] == []
    client.post('/api/clock/start')
    exited = client.post('/api/clock/exit').get_json()
    assert exited['phase'] == 'menu'
    assert exited['jump_in_counts'] == []


def test_game_ends_and_stays_ended(client):
    client.post('/api/clock/settings', json={'max_time': 10, 'invulnerability_period': 1})
    client.post('/api/clock/start')
    state = client.post('/api/clock/tick', json={'delta': 10}).get_json()
    assert state['current_speaker'] == 1
    state = client.post('/api/clock/tick', json={'delta': 10}).get_json()
    assert state['phase'] == 'ended'
    assert state['player_times'] == [0, 0]
    assert client.post('/api/clock/pause').get_json()['phase'] == 'ended'
    assert client.post('/api/clock/reset').get_json()['phase'] == 'menu'


@pytest.mark.parametrize('raw', ['1e400', 'Infinity', '-Infinity', 'NaN'])
def test_non_finite_player_index_rejected(client, raw):
    client.post('/api/clock/start')
    client.post('/api/clock/grace/end')
    for path in ('/api/clock/jump-in', '/api/clock/select'):
        res = client.post(path, data='{"player_index": %s}' % raw, content_type='application/json')
        assert res.status_code == 400
        assert 'player_index' in res.get_json()['error']
    assert client.get('/api/clock/state').get_json()['current_speaker'] == 0


def test_non_finite_settings_rejected(client):
    res = client.post('/api/clock/settings', data='{"max_time": 1e400}', content_type='application/json')
    assert res.status_code == 400
    assert client.get('/api/clock/settings').get_json()['max_time'] == 60
