import datetime

import bcrypt
import jwt

from utils.errors import AuthError


def hash_password(password, rounds=10):
    """Salted bcrypt hash of a plaintext password, returned as str"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def check_password(password, hashed):
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_token(user, settings):
    """Issue a signed session token (7-day pass by default)"""
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        'userId': str(user.id),
        'email': user.email,
        'role': user.role,
        'iat': now,
        'exp': now + datetime.timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token, settings):
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Invalid or expired token")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid or expired token")
