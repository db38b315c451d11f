from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from config.database import CLASSES
from utils.serializers import utcnow
from utils.validators import DEFAULT_THUMBNAIL


class VideoClass:
    def __init__(self, data):
        """
        A live or recorded video class.
        Live classes carry a schedule; recorded ones usually do not.
        """
        self._id = data.get('_id', ObjectId())
        self.title = data['title']
        self.description = data['description']
        self.instructor = data['instructor']
        self.type = data['type']  # 'live' or 'recorded'
        self.video_url = data['videoUrl']
        self.thumbnail = data.get('thumbnail') or DEFAULT_THUMBNAIL
        self.duration = data['duration']  # free text, e.g. "1h 30m"
        self.schedule = data.get('schedule')
        self.category = data['category']
        self.enrolled_students = list(data.get('enrolledStudents', []))
        self.is_active = data.get('isActive', True)
        self.views = data.get('views', 0)
        self.created_at = data.get('createdAt', utcnow())
        self.updated_at = data.get('updatedAt', self.created_at)

    @property
    def id(self):
        return self._id

    def to_dict(self):
        return {
            '_id': self._id,
            'title': self.title,
            'description': self.description,
            'instructor': self.instructor,
            'type': self.type,
            'videoUrl': self.video_url,
            'thumbnail': self.thumbnail,
            'duration': self.duration,
            'schedule': self.schedule,
            'category': self.category,
            'enrolledStudents': self.enrolled_students,
            'isActive': self.is_active,
            'views': self.views,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def summary(self):
        """Listing payload: enrollment list stripped"""
        data = self.to_dict()
        data.pop('enrolledStudents')
        return data


class ClassModel:
    def __init__(self, db):
        self.collection = db.get_collection(CLASSES)

    def create_class(self, class_data):
        video_class = VideoClass(class_data)
        self.collection.insert_one(video_class.to_dict())
        return video_class

    def get_by_id(self, class_id):
        class_data = self.collection.find_one({'_id': class_id})
        return VideoClass(class_data) if class_data else None

    def get_raw(self, class_id):
        return self.collection.find_one({'_id': class_id})

    def get_by_ids(self, class_ids):
        """Expand references; ids with no matching document are skipped"""
        if not class_ids:
            return []
        classes = self.collection.find({'_id': {'$in': list(class_ids)}}).sort('createdAt', DESCENDING)
        return [VideoClass(c) for c in classes]

    def find_classes(self, query, limit=0):
        classes = self.collection.find(query).sort('createdAt', DESCENDING)
        if limit:
            classes = classes.limit(limit)
        return [VideoClass(c) for c in classes]

    def increment_views(self, class_id):
        """Atomically bump the view counter and return the updated class"""
        class_data = self.collection.find_one_and_update(
            {'_id': class_id},
            {'$inc': {'views': 1}},
            return_document=ReturnDocument.AFTER,
        )
        return VideoClass(class_data) if class_data else None

    def update_class(self, class_id, update_data):
        update = dict(update_data)
        update['updatedAt'] = utcnow()
        class_data = self.collection.find_one_and_update(
            {'_id': class_id},
            {'$set': update},
            return_document=ReturnDocument.AFTER,
        )
        return VideoClass(class_data) if class_data else None

    def delete_class(self, class_id):
        result = self.collection.delete_one({'_id': class_id})
        return result.deleted_count > 0

    def count(self, query=None):
        return self.collection.count_documents(query or {})

    def total_views(self):
        result = list(self.collection.aggregate([
            {'$group': {'_id': None, 'total': {'$sum': '$views'}}}
        ]))
        return result[0]['total'] if result else 0

    def most_viewed(self, limit=5):
        classes = self.collection.find(
            {}, {'title': 1, 'views': 1, 'enrolledStudents': 1}
        ).sort('views', DESCENDING).limit(limit)
        return list(classes)

    def category_counts(self):
        return list(self.collection.aggregate([
            {'$group': {'_id': '$category', 'count': {'$sum': 1}}},
            {'$sort': {'count': -1, '_id': 1}},
        ]))

    def add_student(self, class_id, user_id):
        """Returns (class_found, newly_added)"""
        result = self.collection.update_one({'_id': class_id}, {'$addToSet': {'enrolledStudents': user_id}})
        return result.matched_count > 0, result.modified_count > 0

    def remove_student(self, class_id, user_id):
        self.collection.update_one({'_id': class_id}, {'$pull': {'enrolledStudents': user_id}})

    def remove_student_everywhere(self, user_id):
        result = self.collection.update_many(
            {'enrolledStudents': user_id},
            {'$pull': {'enrolledStudents': user_id}},
        )
        return result.modified_count
