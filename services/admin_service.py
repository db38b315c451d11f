import logging

from pymongo.errors import DuplicateKeyError

from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import validate_class, validate_class_update, validate_user_update

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, class_model, user_model):
        self.class_model = class_model
        self.user_model = user_model

    def dashboard(self):
        return {
            'stats': {
                'totalUsers': self.user_model.count_students(),
                'totalClasses': self.class_model.count(),
                'liveClasses': self.class_model.count({'type': 'live', 'isActive': True}),
                'totalViews': self.class_model.total_views(),
            },
            'recentUsers': [u.to_dict() for u in self.user_model.get_students(limit=5)],
            'popularClasses': self.class_model.most_viewed(limit=5),
            'categoryStats': self.class_model.category_counts(),
        }

    # Classes

    def list_classes(self):
        return [c.to_dict() for c in self.class_model.find_classes({})]

    def create_class(self, data):
        clean, errors = validate_class(data)
        if errors:
            raise ValidationError(errors)
        video_class = self.class_model.create_class(clean)
        logger.info("Created %s class %s", video_class.type, video_class.id)
        return video_class.to_dict()

    def update_class(self, class_id, data):
        existing = self.class_model.get_raw(class_id)
        if not existing:
            raise NotFoundError("Class not found")
        changes, errors = validate_class_update(existing, data)
        if errors:
            raise ValidationError(errors)
        video_class = self.class_model.update_class(class_id, changes)
        if not video_class:
            raise NotFoundError("Class not found")
        return video_class.to_dict()

    def delete_class(self, class_id):
        if not self.class_model.delete_class(class_id):
            raise NotFoundError("Class not found")
        cleaned = self.user_model.remove_class_everywhere(class_id)
        logger.info("Deleted class %s, removed from %d enrollment lists", class_id, cleaned)
        return {'message': 'Class deleted successfully'}

    # Users

    def list_users(self):
        return [u.to_dict() for u in self.user_model.get_students()]

    def update_user(self, user_id, data):
        changes, errors = validate_user_update(data)
        if errors:
            raise ValidationError(errors)
        if 'email' in changes:
            other = self.user_model.find_by_email(changes['email'])
            if other and other.id != user_id:
                raise ConflictError("Email already in use")
        try:
            user = self.user_model.update_user(user_id, changes)
        except DuplicateKeyError:
            raise ConflictError("Email already in use")
        if not user:
            raise NotFoundError("User not found")
        return user.to_dict()

    def delete_user(self, user_id):
        if not self.user_model.delete_user(user_id):
            raise NotFoundError("User not found")
        cleaned = self.class_model.remove_student_everywhere(user_id)
        logger.info("Deleted user %s, removed from %d class rosters", user_id, cleaned)
        return {'message': 'User deleted successfully'}
