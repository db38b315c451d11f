import datetime

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from config.database import META, USERS
from utils.serializers import utcnow

SETUP_LOCK_ID = 'admin-setup'
SETUP_LOCK_TTL = datetime.timedelta(seconds=60)

"Manages user accounts, credentials and enrollment references"
class User:
    def __init__(self, data):
        self._id = data.get('_id', ObjectId())
        self.email = data['email']
        self.name = data['name']
        self.password = data.get('password')  # bcrypt hash, never plaintext
        self.role = data.get('role', 'student')  # 'student' or 'admin'
        self.enrolled_classes = list(data.get('enrolledClasses', []))
        self.profile_picture = data.get('profilePicture', '')
        self.created_at = data.get('createdAt', utcnow())
        self.updated_at = data.get('updatedAt', self.created_at)
        self.last_login = data.get('lastLogin')

    @property
    def id(self):
        return self._id

    def to_document(self):
        """Shape stored in the users collection"""
        return {
            '_id': self._id,
            'email': self.email,
            'name': self.name,
            'password': self.password,
            'role': self.role,
            'enrolledClasses': self.enrolled_classes,
            'profilePicture': self.profile_picture,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
            'lastLogin': self.last_login,
        }

    def to_dict(self):
        """Full profile for API responses; the password hash is left out"""
        data = self.to_document()
        data.pop('password')
        return data

    def public(self):
        return {
            'id': str(self._id),
            'name': self.name,
            'email': self.email,
            'role': self.role,
        }


class UserModel:
    def __init__(self, db):
        self.collection = db.get_collection(USERS)
        self.meta = db.get_collection(META)

    def acquire_setup_lock(self):
        """Take the first-run admin setup lock; False while someone else holds it.

        A lock older than SETUP_LOCK_TTL is treated as abandoned and taken over.
        """
        now = utcnow()
        try:
            self.meta.update_one(
                {'_id': SETUP_LOCK_ID, 'lockedAt': {'$lt': now - SETUP_LOCK_TTL}},
                {'$set': {'lockedAt': now}},
                upsert=True,
            )
        except DuplicateKeyError:
            return False
        return True

    def release_setup_lock(self):
        self.meta.delete_one({'_id': SETUP_LOCK_ID})

    def create_user(self, user_data):
        user = User(user_data)
        self.collection.insert_one(user.to_document())
        return user

    def find_by_email(self, email):
        user_data = self.collection.find_one({'email': email})
        return User(user_data) if user_data else None

    def find_by_id(self, user_id):
        user_data = self.collection.find_one({'_id': user_id})
        return User(user_data) if user_data else None

    def admin_exists(self):
        return self.collection.find_one({'role': 'admin'}, {'_id': 1}) is not None

    def record_login(self, user_id):
        now = utcnow()
        self.collection.update_one({'_id': user_id}, {'$set': {'lastLogin': now, 'updatedAt': now}})
        return now

    def update_user(self, user_id, update_data):
        """Apply a $set and return the updated user, or None if it is gone"""
        update = dict(update_data)
        update['updatedAt'] = utcnow()
        user_data = self.collection.find_one_and_update(
            {'_id': user_id},
            {'$set': update},
            return_document=ReturnDocument.AFTER,
        )
        return User(user_data) if user_data else None

    def delete_user(self, user_id):
        result = self.collection.delete_one({'_id': user_id})
        return result.deleted_count > 0

    def get_students(self, limit=0):
        """Students newest first; limit=0 means no limit"""
        students = self.collection.find({'role': 'student'}).sort('createdAt', DESCENDING)
        if limit:
            students = students.limit(limit)
        return [User(student) for student in students]

    def count_students(self):
        return self.collection.count_documents({'role': 'student'})

    def add_enrolled_class(self, user_id, class_id):
        """Idempotent; returns False when the user does not exist"""
        result = self.collection.update_one({'_id': user_id}, {'$addToSet': {'enrolledClasses': class_id}})
        return result.matched_count > 0

    def remove_class_everywhere(self, class_id):
        result = self.collection.update_many(
            {'enrolledClasses': class_id},
            {'$pull': {'enrolledClasses': class_id}},
        )
        return result.modified_count
