import json
import os


def default_session_path():
    return os.path.expanduser(os.getenv('LEARNSTREAM_SESSION_FILE', '~/.learnstream/session.json'))


class NotLoggedIn(Exception):
    pass


class SessionStore:
    """Token and user stored on disk between CLI invocations"""

    def __init__(self, path=None):
        self.path = path or default_session_path()

    def load(self):
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError):
            return None
        if not data.get('token') or not data.get('user'):
            return None
        return data

    def save(self, token, user):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'token': token, 'user': user}, f)
        os.chmod(self.path, 0o600)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)

    @property
    def token(self):
        data = self.load()
        return data['token'] if data else None

    @property
    def user(self):
        data = self.load()
        return data['user'] if data else None

    def is_admin(self):
        user = self.user
        return bool(user) and user.get('role') == 'admin'

    def require(self):
        data = self.load()
        if not data:
            raise NotLoggedIn("Not logged in. Run `learnstream login` first.")
        return data
