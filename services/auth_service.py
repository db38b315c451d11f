import logging

from pymongo.errors import DuplicateKeyError

from utils.errors import AuthError, ConflictError, NotFoundError, ValidationError
from utils.security import check_password, create_token, hash_password
from utils.validators import validate_login, validate_profile_update, validate_registration

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    def __init__(self, user_model, settings):
        self.user_model = user_model
        self.settings = settings

    def _create_account(self, data, role):
        clean, errors = validate_registration(data)
        if errors:
            raise ValidationError(errors)

        if self.user_model.find_by_email(clean['email']):
            raise ConflictError("User already exists")

        try:
            user = self.user_model.create_user({
                'name': clean['name'],
                'email': clean['email'],
                'password': hash_password(clean['password'], self.settings.BCRYPT_ROUNDS),
                'role': role,
            })
        except DuplicateKeyError:
            # lost a race with a concurrent registration for the same email
            raise ConflictError("User already exists")
        logger.info("Created %s account %s", role, user.id)
        return user

    def register(self, data):
        user = self._create_account(data, 'student')
        return {'token': create_token(user, self.settings), 'user': user.public()}

    def login(self, data):
        clean, errors = validate_login(data)
        if errors:
            raise ValidationError(errors)

        user = self.user_model.find_by_email(clean['email'])
        if not user or not check_password(clean['password'], user.password):
            raise AuthError(INVALID_CREDENTIALS)

        user.last_login = self.user_model.record_login(user.id)
        return {'token': create_token(user, self.settings), 'user': user.public()}

    def get_profile(self, user_id):
        user = self.user_model.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user.to_dict()

    def update_profile(self, user_id, data):
        changes, errors = validate_profile_update(data)
        if errors:
            raise ValidationError(errors)
        user = self.user_model.update_user(user_id, changes)
        if not user:
            raise NotFoundError("User not found")
        return user.to_dict()

    def setup_admin(self, data):
        """First-run bootstrap of the initial administrator.

        The check and the insert run under a lock so that two concurrent
        first-run calls cannot both create an admin.
        """
        if not self.user_model.acquire_setup_lock():
            raise ConflictError("Admin setup already in progress")
        try:
            if self.user_model.admin_exists():
                raise ConflictError("Admin already exists")
            admin = self._create_account(data, 'admin')
        finally:
            self.user_model.release_setup_lock()
        logger.warning("Bootstrap admin account created for %s", admin.email)
        return {'message': 'Admin created successfully', 'user': admin.public()}
