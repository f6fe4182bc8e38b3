import pytest
import requests

from zhijiao.client.mock_data import INITIAL_RESOURCES
from zhijiao.client.storage import StorageClient


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, content_type: str = 'application/json'):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.headers = {'content-type': content_type}
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON')
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f'{self.status_code} error')


class _FakeSession:
    def __init__(self):
        self.calls = []
        self.responses = {}

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses[(method, url)]
        if isinstance(response, list):
            response = response.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._respond('GET', url, **kwargs)

    def post(self, url, **kwargs):
        return self._respond('POST', url, **kwargs)

    def put(self, url, **kwargs):
        return self._respond('PUT', url, **kwargs)

    def delete(self, url, **kwargs):
        return self._respond('DELETE', url, **kwargs)


@pytest.fixture
def session() -> _FakeSession:
    return _FakeSession()


@pytest.fixture
def client(session) -> StorageClient:
    return StorageClient('http://api.test/', session=session)


def test_get_resources_returns_api_data(client, session) -> None:
    session.responses[('GET', 'http://api.test/api/resources')] = _FakeResponse(payload=[{'id': 'a'}])

    assert client.get_resources() == [{'id': 'a'}]


@pytest.mark.parametrize(
    'response',
    [
        requests.ConnectionError('offline'),
        _FakeResponse(status_code=500, payload={'error': 'x'}),
        _FakeResponse(payload=None, content_type='text/html'),
    ],
)
def test_get_resources_falls_back_to_mock_data(client, session, response) -> None:
    session.responses[('GET', 'http://api.test/api/resources')] = response

    resources = client.get_resources()

    assert resources == INITIAL_RESOURCES
    resources[0]['title'] = 'changed'
    assert INITIAL_RESOURCES[0]['title'] != 'changed'


def test_save_resource_refetches_list(client, session) -> None:
    session.responses[('POST', 'http://api.test/api/resources')] = _FakeResponse(payload={'success': True})
    session.responses[('GET', 'http://api.test/api/resources')] = _FakeResponse(payload=[{'id': 'new'}])

    assert client.save_resource({'title': 't'}) == [{'id': 'new'}]
    assert session.calls[0][2]['json'] == {'title': 't'}


def test_save_resource_failure_returns_empty_list(client, session) -> None:
    session.responses[('POST', 'http://api.test/api/resources')] = _FakeResponse(status_code=500, payload={})

    assert client.save_resource({'title': 't'}) == []


def test_update_and_delete_report_success(client, session) -> None:
    session.responses[('PUT', 'http://api.test/api/resources')] = _FakeResponse(payload={'success': True})
    session.responses[('DELETE', 'http://api.test/api/resources')] = _FakeResponse(status_code=400, payload={})

    assert client.update_resource({'id': 'a'}) is True
    assert client.delete_resource('a') is False
    assert session.calls[-1][2]['params'] == {'id': 'a'}


def test_record_visit_increments_once_per_session(client, session) -> None:
    session.responses[('POST', 'http://api.test/api/stats')] = _FakeResponse(payload={'visitor_count': 8})
    session.responses[('GET', 'http://api.test/api/stats')] = _FakeResponse(payload={'visitor_count': 8})

    assert client.record_visit() == 8
    assert client.record_visit() == 8

    assert [call[0] for call in session.calls] == ['POST', 'GET']


def test_login_returns_role_or_none(client, session) -> None:
    session.responses[('POST', 'http://api.test/api/auth')] = [
        _FakeResponse(payload={'success': True, 'role': 'admin'}),
        _FakeResponse(status_code=401, payload={'error': 'Invalid email or password'}),
    ]

    assert client.login('a@b.c', 'pw') == 'admin'
    assert client.login('a@b.c', 'bad') is None
    assert session.calls[0][2]['json'] == {'action': 'login', 'email': 'a@b.c', 'password': 'pw'}


def test_ask_assistant_surfaces_errors(client, session) -> None:
    session.responses[('POST', 'http://api.test/api/chat')] = [
        _FakeResponse(payload={'reply': '你好'}),
        _FakeResponse(status_code=400, payload={'error': 'Message too long (max 1000 chars)'}),
    ]

    assert client.ask_assistant('hi') == '你好'
    assert 'Message too long' in client.ask_assistant('x' * 2000)


def test_toggle_like_adjusts_displayed_count(client) -> None:
    resource = {'id': 'a', 'likes': 3}

    assert client.toggle_like('a') is True
    assert client.display_likes(resource) == 4
    assert client.toggle_like('a') is False
    assert client.display_likes(resource) == 3


def test_get_resources_falls_back_when_payload_is_not_a_list(client, session) -> None:
    session.responses[('GET', 'http://api.test/api/resources')] = _FakeResponse(payload={'error': 'x'})

    assert client.get_resources() == INITIAL_RESOURCES


@pytest.mark.parametrize('payload', [[1, 2], 'text'])
def test_non_object_json_is_handled_everywhere(client, session, payload) -> None:
    session.responses[('GET', 'http://api.test/api/stats')] = _FakeResponse(payload=payload)
    session.responses[('POST', 'http://api.test/api/stats')] = _FakeResponse(payload=payload)
    session.responses[('POST', 'http://api.test/api/auth')] = _FakeResponse(payload=payload)
    session.responses[('POST', 'http://api.test/api/chat')] = _FakeResponse(payload=payload)

    assert client.get_visitor_count() == 0
    assert client.record_visit() == 0
    assert client.login('a@b.c', 'pw') is None
    assert client.ask_assistant('hi') == '抱歉，AI 助手暂时无法连接，请稍后再试。'
