"""
Tests for the remote text entry web routes
"""

import pytest
from flask import Flask

from wristdo.apps.todo.routes import create_todo_blueprint
from wristdo.web.webserver import WristDoWebServer

TIMEOUT = 5


def _client(manager):
    app = Flask(__name__)
    app.register_blueprint(create_todo_blueprint(manager))
    return app.test_client()


@pytest.fixture()
def client(manager):
    manager.refresh().result(timeout=TIMEOUT)
    return _client(manager)


def test_get_empty(client):
    resp = client.get('/api/tasks')
    assert resp.status_code == 200
    assert resp.get_json() == {'tasks': []}


def test_post_adds_task(client, store):
    resp = client.post('/api/tasks', json={'text': 'Buy milk'})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body['success'] is True
    assert body['tasks'] == [{'id': 1, 'text': 'Buy milk'}]
    assert store.count() == 1

    assert client.get('/api/tasks').get_json()['tasks'] == body['tasks']


@pytest.mark.parametrize("payload", [{"text": "   "}, {"text": ""}, {}, None, ["Buy milk"], "x", 42])
def test_post_blank_rejected(client, store, payload):
    resp = client.post('/api/tasks', json=payload)
    assert resp.status_code == 400
    assert store.count() == 0


def test_delete_existing(client, store):
    task_id = client.post('/api/tasks', json={'text': 'Walk dog'}).get_json()['tasks'][0]['id']

    resp = client.delete(f'/api/tasks/{task_id}')

    assert resp.status_code == 200
    assert resp.get_json()['tasks'] == []
    assert store.count() == 0


def test_delete_missing_is_404(client):
    resp = client.delete('/api/tasks/42')
    assert resp.status_code == 404


def test_storage_failure_is_500(fake_manager, fake_store):
    fake_manager.refresh().result(timeout=TIMEOUT)
    fake_store.fail = True

    resp = _client(fake_manager).post('/api/tasks', json={'text': 'Buy milk'})

    assert resp.status_code == 500
    assert 'disk I/O error' in resp.get_json()['error']


def test_index_page_lists_tasks(manager):
    manager.add_task("Water plants").result(timeout=TIMEOUT)
    server = WristDoWebServer(manager, port=0)

    resp = server.flask_app.test_client().get('/')

    assert resp.status_code == 200
    assert b"Water plants" in resp.data


def test_post_over_length_rejected(manager, store):
    manager.refresh().result(timeout=TIMEOUT)
    app = Flask(__name__)
    app.register_blueprint(create_todo_blueprint(manager, max_length=10))

    resp = app.test_client().post('/api/tasks', json={'text': 'x' * 11})

    assert resp.status_code == 400
    assert '10 characters' in resp.get_json()['error']
    assert store.count() == 0


def test_post_at_length_limit_accepted(manager, store):
    app = Flask(__name__)
    app.register_blueprint(create_todo_blueprint(manager, max_length=10))

    resp = app.test_client().post('/api/tasks', json={'text': 'x' * 10})

    assert resp.status_code == 201
    assert store.count() == 1


def test_delete_before_first_load(manager, store):
    store.insert("present")

    resp = _client(manager).delete('/api/tasks/1')

    assert resp.status_code == 200
    assert resp.get_json()['tasks'] == []
    assert store.count() == 0


def test_delete_already_gone_is_404(client, store):
    task_id = client.post('/api/tasks', json={'text': 'Walk dog'}).get_json()['tasks'][0]['id']
    store.delete(task_id)

    resp = client.delete(f'/api/tasks/{task_id}')

    assert resp.status_code == 404
    assert client.get('/api/tasks').get_json()['tasks'] == [], "Cache refreshed after the miss"


def test_index_page_uses_length_cap(manager):
    server = WristDoWebServer(manager, port=0, max_length=80)

    resp = server.flask_app.test_client().get('/')

    assert b'maxlength="80"' in resp.data
