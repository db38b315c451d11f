import jwt
import pytest
from bson import ObjectId

from config.settings import Settings
from models.user import User
from utils.errors import AuthError
from utils.security import check_password, create_token, decode_token, hash_password


@pytest.fixture
def settings():
    return Settings(JWT_SECRET='unit-secret')


def test_hash_is_salted_and_verifiable():
    first = hash_password('secret1', rounds=4)
    second = hash_password('secret1', rounds=4)
    assert first != second
    assert check_password('secret1', first)
    assert not check_password('secret2', first)


def test_check_password_handles_missing_or_foreign_hashes():
    assert not check_password('secret1', None)
    assert not check_password('secret1', 'plaintext-not-bcrypt')


def test_token_round_trip(settings):
    user = User({'_id': ObjectId(), 'email': 'ann@x.com', 'name': 'Ann', 'role': 'admin'})
    payload = decode_token(create_token(user, settings), settings)
    assert payload['userId'] == str(user.id)
    assert payload['email'] == 'ann@x.com'
    assert payload['role'] == 'admin'


def test_token_signed_with_other_secret_is_rejected(settings):
    forged = jwt.encode({'userId': 'x', 'role': 'admin'}, 'other-secret', algorithm='HS256')
    with pytest.raises(AuthError):
        decode_token(forged, settings)


def test_settings_reject_unknown_overrides():
    with pytest.raises(AttributeError):
        Settings(NOT_A_SETTING=1)
