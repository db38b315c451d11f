import logging
from functools import wraps

from bson import ObjectId
from flask import current_app, g, request

from services.registry import get_services
from utils.errors import AuthError, ForbiddenError
from utils.security import decode_token

logger = logging.getLogger(__name__)


def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    scheme, _, token = auth_header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def _stored_role(user_id):
    """Role as currently stored; None for an unknown account"""
    if not ObjectId.is_valid(user_id):
        return None
    user = get_services().user_model.find_by_id(ObjectId(user_id))
    return user.role if user else None


def token_required(f):
    """Reject the request unless it carries a valid session token"""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise AuthError("Access token required")

        payload = decode_token(token, current_app.config['SETTINGS'])
        if not payload.get('userId'):
            raise AuthError("Invalid or expired token")

        g.current_user = payload
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    """Token check followed by the admin role gate.

    The role is read from the users collection rather than the token claim,
    so a demoted or deleted admin loses access before the token expires.
    """
    @wraps(f)
    @token_required
    def decorated(*args, **kwargs):
        role = _stored_role(g.current_user.get('userId'))
        if role != 'admin':
            logger.warning("Admin access denied for %s (role: %s)", g.current_user.get('email'), role)
            raise ForbiddenError("Admin access required")
        return f(*args, **kwargs)
    return decorated
