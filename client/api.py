"""HTTP client for the LearnStream API.

Mirrors the endpoints one method each. Protected calls send the stored
bearer token; a 401 on such a call clears the stored session so the next
command asks the user to log in again.
"""
import logging
import os

import requests

from client.session import NotLoggedIn, SessionStore

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:5000/api'


class ApiClientError(Exception):
    def __init__(self, status, message, errors=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []


class SessionExpired(ApiClientError):
    pass


class ApiClient:
    def __init__(self, base_url=None, store=None, http=None, timeout=30):
        self.base_url = (base_url or os.getenv('LEARNSTREAM_API_URL', DEFAULT_API_URL)).rstrip('/')
        self.store = store or SessionStore()
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method, endpoint, data=None, params=None, auth=True):
        url = f"{self.base_url}{endpoint}"
        headers = {'Content-Type': 'application/json'}
        if auth:
            token = self.store.token
            if not token:
                raise NotLoggedIn("Not logged in. Run `learnstream login` first.")
            headers['Authorization'] = f'Bearer {token}'

        try:
            response = self.http.request(method, url, json=data, params=params,
                                         headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("Request to %s failed: %s", url, e)
            raise ApiClientError(0, f"Could not reach API at {self.base_url}: {e}")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get('message') if isinstance(body, dict) else None
            errors = body.get('errors') if isinstance(body, dict) else None
            if errors and not message:
                message = '; '.join(e.get('message', str(e)) for e in errors)
            message = message or f"API call failed ({response.status_code})"
            if response.status_code == 401 and auth:
                self.store.clear()
                raise SessionExpired(401, "Session expired, please log in again")
            raise ApiClientError(response.status_code, message, errors)

        return body

    # Auth

    def register(self, name, email, password):
        result = self._request('POST', '/auth/register',
                               {'name': name, 'email': email, 'password': password}, auth=False)
        self.store.save(result['token'], result['user'])
        return result

    def login(self, email, password):
        result = self._request('POST', '/auth/login', {'email': email, 'password': password}, auth=False)
        self.store.save(result['token'], result['user'])
        return result

    def logout(self):
        self.store.clear()

    def get_me(self):
        return self._request('GET', '/auth/me')

    def update_me(self, changes):
        return self._request('PUT', '/auth/me', changes)

    def health(self):
        return self._request('GET', '/health', auth=False)

    # Classes

    def get_classes(self, **filters):
        params = {k: v for k, v in filters.items() if v not in (None, '')}
        return self._request('GET', '/classes', params=params or None)

    def get_stats(self):
        return self._request('GET', '/classes/stats')

    def get_class(self, class_id):
        return self._request('GET', f'/classes/{class_id}')

    def enroll(self, class_id):
        return self._request('POST', f'/classes/{class_id}/enroll')

    def get_my_classes(self):
        return self._request('GET', '/user/classes')

    # Admin

    def get_dashboard(self):
        return self._request('GET', '/admin/dashboard')

    def admin_get_classes(self):
        return self._request('GET', '/admin/classes')

    def create_class(self, class_data):
        return self._request('POST', '/admin/classes', class_data)

    def update_class(self, class_id, class_data):
        return self._request('PUT', f'/admin/classes/{class_id}', class_data)

    def delete_class(self, class_id):
        return self._request('DELETE', f'/admin/classes/{class_id}')

    def get_users(self):
        return self._request('GET', '/admin/users')

    def update_user(self, user_id, user_data):
        return self._request('PUT', f'/admin/users/{user_id}', user_data)

    def delete_user(self, user_id):
        return self._request('DELETE', f'/admin/users/{user_id}')

    def setup_admin(self, name, email, password):
        return self._request('POST', '/admin/setup',
                             {'name': name, 'email': email, 'password': password}, auth=False)
