import io
import json

import pytest
import requests

from client import cli, forms, views
from client.api import ApiClient, ApiClientError, SessionExpired
from client.session import NotLoggedIn, SessionStore


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError('no json')
        return self._body


class FakeHttp:
    """Records requests and replays queued responses"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def store(tmp_path):
    return SessionStore(str(tmp_path / 'session.json'))


def _client(store, *responses):
    return ApiClient(base_url='http://api.test/api/', store=store, http=FakeHttp(*responses))


def test_login_persists_session(store):
    user = {'id': '1', 'name': 'Ann', 'email': 'ann@x.com', 'role': 'student'}
    client = _client(store, FakeResponse(200, {'token': 'tok', 'user': user}))

    client.login('ann@x.com', 'secret1')

    call = client.http.calls[0]
    assert call['url'] == 'http://api.test/api/auth/login'
    assert 'Authorization' not in call['headers']
    assert store.load() == {'token': 'tok', 'user': user}
    assert not store.is_admin()


def test_protected_call_sends_bearer_token(store):
    store.save('tok', {'role': 'student'})
    client = _client(store, FakeResponse(200, []))

    client.get_classes(type='live', search='', limit=None)

    call = client.http.calls[0]
    assert call['headers']['Authorization'] == 'Bearer tok'
    assert call['params'] == {'type': 'live'}


def test_protected_call_without_session_is_refused_locally(store):
    client = _client(store)
    with pytest.raises(NotLoggedIn):
        client.get_stats()
    assert client.http.calls == []


def test_unauthorized_response_clears_session(store):
    store.save('expired', {'role': 'student'})
    client = _client(store, FakeResponse(401, {'message': 'Invalid or expired token'}))

    with pytest.raises(SessionExpired):
        client.get_me()
    assert store.load() is None


def test_failed_login_keeps_nothing_and_reports_message(store):
    client = _client(store, FakeResponse(401, {'message': 'Invalid credentials'}))

    with pytest.raises(ApiClientError) as excinfo:
        client.login('ann@x.com', 'nope')

    assert not isinstance(excinfo.value, SessionExpired)
    assert excinfo.value.message == 'Invalid credentials'
    assert store.load() is None


def test_field_errors_are_surfaced(store):
    errors = [{'field': 'schedule', 'message': 'Schedule is required for live classes'}]
    store.save('tok', {'role': 'admin'})
    client = _client(store, FakeResponse(400, {'errors': errors}))

    with pytest.raises(ApiClientError) as excinfo:
        client.create_class({'type': 'live'})

    assert excinfo.value.status == 400
    assert excinfo.value.errors == errors
    assert 'Schedule is required' in excinfo.value.message


def test_network_failure_becomes_client_error(store):
    client = _client(store, requests.ConnectionError('refused'))
    with pytest.raises(ApiClientError) as excinfo:
        client.health()
    assert excinfo.value.status == 0


def test_corrupt_session_file_is_ignored(store):
    with open(store.path, 'w') as f:
        f.write('{not json')
    assert store.load() is None
    with pytest.raises(NotLoggedIn):
        store.require()


def test_registration_form_checks():
    with pytest.raises(forms.FormError) as excinfo:
        forms.check_registration('', 'bad', 'abc', 'abd')
    assert excinfo.value.errors == [
        'Name is required',
        'Enter a valid email address',
        'Passwords do not match',
        'Password must be at least 6 characters',
    ]
    assert forms.check_registration(' Ann ', 'ann@x.com', 'secret1', 'secret1')['name'] == 'Ann'


def test_class_form_requires_schedule_for_live():
    with pytest.raises(forms.FormError):
        forms.class_form(title='t', description='d', instructor='i', class_type='live',
                         video_url='v', duration='1h', category='c')
    payload = forms.class_form(class_type='live', schedule='2030-01-01T10:00', partial=True)
    assert payload == {'type': 'live', 'schedule': '2030-01-01T10:00'}


def test_views_render_lists_and_dashboard():
    classes = [{'_id': 'abc', 'title': 'Intro', 'type': 'recorded', 'instructor': 'G',
                'category': 'Prog', 'duration': '1h', 'views': 3}]
    table = views.render_class_list(classes)
    assert 'Intro' in table and '1h' in table
    assert views.render_class_list([]) == 'No classes found.'

    dashboard = views.render_dashboard({
        'stats': {'totalUsers': 2, 'totalClasses': 1, 'liveClasses': 0, 'totalViews': 3},
        'recentUsers': [], 'popularClasses': classes, 'categoryStats': [{'_id': 'Prog', 'count': 1}],
    })
    assert 'Students:     2' in dashboard
    assert 'Prog' in dashboard


class FakeApi:
    def __init__(self, store, classes=None):
        self.store = store
        self.classes = classes or []
        self.created = []

    def get_classes(self, **filters):
        self.filters = filters
        return self.classes

    def get_dashboard(self):
        raise AssertionError('should not be called')

    def register(self, name, email, password):
        return {'token': 't', 'user': {'name': name}}


def _run(argv, api):
    out, err = io.StringIO(), io.StringIO()
    code = cli.main(argv, client=api, out=out, err=err)
    return code, out.getvalue(), err.getvalue()


def test_cli_lists_classes_with_filters(store):
    store.save('tok', {'role': 'student'})
    api = FakeApi(store, classes=[{'_id': '1', 'title': 'Intro', 'type': 'live', 'schedule': '2030-01-01T10:00:00'}])

    code, out, _ = _run(['classes', '--type', 'live', '--search', 'intro'], api)

    assert code == 0
    assert 'Intro' in out
    assert api.filters == {'type': 'live', 'category': None, 'search': 'intro', 'limit': None}


def test_cli_json_output(store):
    store.save('tok', {'role': 'student'})
    api = FakeApi(store, classes=[{'_id': '1', 'title': 'Intro'}])

    code, out, _ = _run(['--json', 'classes'], api)

    assert code == 0
    assert json.loads(out) == [{'_id': '1', 'title': 'Intro'}]


def test_cli_refuses_admin_commands_for_students(store):
    store.save('tok', {'role': 'student'})
    code, _, err = _run(['admin', 'dashboard'], FakeApi(store))
    assert code == 1
    assert 'Admin access required' in err


def test_cli_requires_login(store):
    code, _, err = _run(['stats'], FakeApi(store))
    assert code == 1
    assert 'Not logged in' in err


def test_cli_register_checks_form_before_calling_api(store):
    code, _, err = _run(['register', '--name', 'Ann', '--email', 'ann@x.com',
                         '--password', 'secret1', '--confirm', 'secret2'], FakeApi(store))
    assert code == 2
    assert 'Passwords do not match' in err
