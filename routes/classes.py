from flask import Blueprint, g, request, jsonify

from services.registry import get_services
from utils.auth import token_required
from utils.serializers import to_object_id

classes_bp = Blueprint('classes', __name__)


def _current_user_id():
    return to_object_id(g.current_user['userId'], 'User')


@classes_bp.route('/api/classes', methods=['GET'])
@token_required
def list_classes():
    """Active classes, newest first, with optional type/category/search/limit"""
    classes = get_services().classes.list_classes(
        class_type=request.args.get('type'),
        category=request.args.get('category'),
        search=request.args.get('search'),
        limit=request.args.get('limit'),
    )
    return jsonify(classes)


@classes_bp.route('/api/classes/stats', methods=['GET'])
@token_required
def class_stats():
    return jsonify(get_services().classes.get_stats(_current_user_id()))


@classes_bp.route('/api/classes/<class_id>', methods=['GET'])
@token_required
def get_class(class_id):
    return jsonify(get_services().classes.get_class(to_object_id(class_id, 'Class')))


@classes_bp.route('/api/classes/<class_id>/enroll', methods=['POST'])
@token_required
def enroll(class_id):
    result = get_services().classes.enroll(to_object_id(class_id, 'Class'), _current_user_id())
    return jsonify(result)


@classes_bp.route('/api/user/classes', methods=['GET'])
@token_required
def my_classes():
    """Caller's enrolled classes, fully expanded"""
    return jsonify(get_services().classes.my_classes(_current_user_id()))
