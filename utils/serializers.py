import datetime

from bson import ObjectId
from bson.errors import InvalidId
from flask.json.provider import DefaultJSONProvider

from utils.errors import NotFoundError


class MongoJSONProvider(DefaultJSONProvider):
    """JSON provider that understands ObjectId and datetime values"""

    @staticmethod
    def default(obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            if obj.tzinfo is None:
                obj = obj.replace(tzinfo=datetime.timezone.utc)
            return obj.isoformat()
        return DefaultJSONProvider.default(obj)


def to_object_id(value, resource='Resource'):
    """Parse a path id; ids that cannot exist are reported as not found"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(f"{resource} not found")


def utcnow():
    # naive UTC, the same shape pymongo hands back by default
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
