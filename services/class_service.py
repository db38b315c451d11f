import logging
import re

from pymongo.errors import PyMongoError

from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def parse_limit(value, default):
    """Positive integer limit; anything else falls back to the default"""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default


def build_class_query(class_type=None, category=None, search=None):
    query = {'isActive': True}
    if class_type:
        query['type'] = class_type
    if category:
        query['category'] = category
    if search:
        # literal substring match, not a user-supplied regex
        pattern = {'$regex': re.escape(search), '$options': 'i'}
        query['$or'] = [
            {'title': pattern},
            {'description': pattern},
            {'instructor': pattern},
        ]
    return query


class ClassService:
    def __init__(self, class_model, user_model, settings):
        self.class_model = class_model
        self.user_model = user_model
        self.settings = settings

    def list_classes(self, class_type=None, category=None, search=None, limit=None):
        query = build_class_query(class_type, category, search)
        limit = parse_limit(limit, self.settings.DEFAULT_CLASS_LIMIT)
        return [c.summary() for c in self.class_model.find_classes(query, limit)]

    def get_stats(self, user_id):
        user = self.user_model.find_by_id(user_id)
        return {
            'totalClasses': self.class_model.count({'isActive': True}),
            'liveClasses': self.class_model.count({'type': 'live', 'isActive': True}),
            'recordedClasses': self.class_model.count({'type': 'recorded', 'isActive': True}),
            'enrolledClasses': len(user.enrolled_classes) if user else 0,
            'totalViews': self.class_model.total_views(),
        }

    def get_class(self, class_id):
        """Fetch one class; every fetch counts as a view"""
        video_class = self.class_model.increment_views(class_id)
        if not video_class:
            raise NotFoundError("Class not found")
        return video_class.to_dict()

    def enroll(self, class_id, user_id):
        """Enroll a user in a class, keeping both reference lists in step.

        Both writes use $addToSet, so repeating the call is a no-op. The class
        side is written first; if the user side then fails, the class write is
        undone before the error propagates. A roster entry that predates this
        call is kept when the user write fails.
        """
        class_found, added = self.class_model.add_student(class_id, user_id)
        if not class_found:
            raise NotFoundError("Class not found")

        try:
            user_found = self.user_model.add_enrolled_class(user_id, class_id)
        except PyMongoError:
            logger.warning("Enrollment of %s in %s failed, rolling back class side", user_id, class_id)
            if added:
                self.class_model.remove_student(class_id, user_id)
            raise

        if not user_found:
            # no such user, so any roster entry for them is dangling
            self.class_model.remove_student(class_id, user_id)
            raise NotFoundError("User not found")

        return {'message': 'Enrolled successfully'}

    def my_classes(self, user_id):
        user = self.user_model.find_by_id(user_id)
        if not user:
            return []
        return [c.to_dict() for c in self.class_model.get_by_ids(user.enrolled_classes)]
