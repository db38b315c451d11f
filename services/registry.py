from flask import current_app

from models.user import UserModel
from models.video_class import ClassModel
from services.admin_service import AdminService
from services.auth_service import AuthService
from services.class_service import ClassService

EXTENSION_KEY = 'learnstream'


class Services:
    """Per-process service objects sharing one Database"""

    def __init__(self, db, settings):
        self.db = db
        self.user_model = UserModel(db)
        self.class_model = ClassModel(db)
        self.auth = AuthService(self.user_model, settings)
        self.classes = ClassService(self.class_model, self.user_model, settings)
        self.admin = AdminService(self.class_model, self.user_model)


def get_services():
    return current_app.extensions[EXTENSION_KEY]
