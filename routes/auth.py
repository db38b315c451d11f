from flask import Blueprint, g, request, jsonify

from services.registry import get_services
from utils.auth import token_required
from utils.serializers import to_object_id

auth_bp = Blueprint('auth', __name__)


def _current_user_id():
    return to_object_id(g.current_user['userId'], 'User')


@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    """Create a student account and hand back a session token"""
    result = get_services().auth.register(request.get_json(silent=True))
    return jsonify(result), 201


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    result = get_services().auth.login(request.get_json(silent=True))
    return jsonify(result)


@auth_bp.route('/api/auth/me', methods=['GET'])
@token_required
def me():
    return jsonify(get_services().auth.get_profile(_current_user_id()))


@auth_bp.route('/api/auth/me', methods=['PUT'])
@token_required
def update_me():
    """Profile edit: name and profile picture only"""
    user = get_services().auth.update_profile(_current_user_id(), request.get_json(silent=True))
    return jsonify(user)
