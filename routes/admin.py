from flask import Blueprint, request, jsonify

from services.registry import get_services
from utils.auth import admin_required
from utils.serializers import to_object_id

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/api/admin/dashboard', methods=['GET'])
@admin_required
def dashboard():
    """Aggregate counts, recent students, popular classes and categories"""
    return jsonify(get_services().admin.dashboard())


@admin_bp.route('/api/admin/classes', methods=['GET'])
@admin_required
def list_classes():
    return jsonify(get_services().admin.list_classes())


@admin_bp.route('/api/admin/classes', methods=['POST'])
@admin_required
def create_class():
    video_class = get_services().admin.create_class(request.get_json(silent=True))
    return jsonify(video_class), 201


@admin_bp.route('/api/admin/classes/<class_id>', methods=['PUT'])
@admin_required
def update_class(class_id):
    video_class = get_services().admin.update_class(
        to_object_id(class_id, 'Class'), request.get_json(silent=True)
    )
    return jsonify(video_class)


@admin_bp.route('/api/admin/classes/<class_id>', methods=['DELETE'])
@admin_required
def delete_class(class_id):
    return jsonify(get_services().admin.delete_class(to_object_id(class_id, 'Class')))


@admin_bp.route('/api/admin/users', methods=['GET'])
@admin_required
def list_users():
    """Student accounts only, newest first"""
    return jsonify(get_services().admin.list_users())


@admin_bp.route('/api/admin/users/<user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    user = get_services().admin.update_user(to_object_id(user_id, 'User'), request.get_json(silent=True))
    return jsonify(user)


@admin_bp.route('/api/admin/users/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    return jsonify(get_services().admin.delete_user(to_object_id(user_id, 'User')))


@admin_bp.route('/api/admin/setup', methods=['POST'])
def setup():
    """One-time bootstrap of the first admin; refuses once any admin exists"""
    result = get_services().auth.setup_admin(request.get_json(silent=True))
    return jsonify(result), 201
