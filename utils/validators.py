"""Request payload validation.

Each validator returns ``(clean_data, errors)`` where ``errors`` is a list of
``{"field", "message"}`` dicts. Callers raise ValidationError when the list
is non-empty, before touching the database.
"""
import datetime
import re

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

ROLES = ('student', 'admin')
CLASS_TYPES = ('live', 'recorded')
MIN_PASSWORD_LENGTH = 6
DEFAULT_THUMBNAIL = 'https://via.placeholder.com/300x200'

CLASS_REQUIRED_FIELDS = ('title', 'description', 'instructor', 'type', 'videoUrl', 'duration', 'category')
CLASS_TEXT_FIELDS = CLASS_REQUIRED_FIELDS + ('thumbnail',)
CLASS_WRITABLE_FIELDS = CLASS_TEXT_FIELDS + ('schedule', 'isActive')


def _error(field, message):
    return {'field': field, 'message': message}


def _as_dict(data):
    # JSON bodies that are not objects (lists, strings, numbers) count as empty
    return data if isinstance(data, dict) else {}


def _text(value):
    return value.strip() if isinstance(value, str) else ''


def normalize_email(email):
    return _text(email).lower()


def is_valid_email(email):
    return bool(EMAIL_RE.match(email or ''))


def parse_schedule(value):
    """Parse an ISO-8601 schedule into naive UTC; empty values mean no schedule"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.datetime.fromisoformat(text)
    else:
        raise ValueError("schedule must be an ISO-8601 datetime string")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def validate_registration(data):
    data = _as_dict(data)
    errors = []
    name = _text(data.get('name'))
    email = normalize_email(data.get('email'))
    password = data.get('password')

    if not is_valid_email(email):
        errors.append(_error('email', 'A valid email is required'))
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append(_error('password', f'Password must be at least {MIN_PASSWORD_LENGTH} characters'))
    if not name:
        errors.append(_error('name', 'Name is required'))

    return {'name': name, 'email': email, 'password': password}, errors


def validate_login(data):
    data = _as_dict(data)
    errors = []
    email = normalize_email(data.get('email'))
    password = data.get('password')

    if not is_valid_email(email):
        errors.append(_error('email', 'A valid email is required'))
    if not isinstance(password, str) or not password:
        errors.append(_error('password', 'Password is required'))

    return {'email': email, 'password': password}, errors


def validate_profile_update(data):
    data = _as_dict(data)
    errors = []
    clean = {}
    if 'name' in data:
        name = _text(data.get('name'))
        if not name:
            errors.append(_error('name', 'Name cannot be empty'))
        clean['name'] = name
    if 'profilePicture' in data:
        picture = data.get('profilePicture')
        if picture is not None and not isinstance(picture, str):
            errors.append(_error('profilePicture', 'Profile picture must be a URL string'))
        clean['profilePicture'] = _text(picture)
    if not clean and not errors:
        errors.append(_error('body', 'Nothing to update'))
    return clean, errors


def validate_user_update(data):
    """Admin edits of a user: name, email and role only"""
    data = _as_dict(data)
    errors = []
    clean = {}
    if 'name' in data:
        name = _text(data.get('name'))
        if not name:
            errors.append(_error('name', 'Name cannot be empty'))
        clean['name'] = name
    if 'email' in data:
        email = normalize_email(data.get('email'))
        if not is_valid_email(email):
            errors.append(_error('email', 'A valid email is required'))
        clean['email'] = email
    if 'role' in data:
        role = data.get('role')
        if role not in ROLES:
            errors.append(_error('role', f"Role must be one of: {', '.join(ROLES)}"))
        clean['role'] = role
    if not clean and not errors:
        errors.append(_error('body', 'Nothing to update'))
    return clean, errors


def _check_class(doc):
    errors = []
    for field in CLASS_REQUIRED_FIELDS:
        if not doc.get(field):
            errors.append(_error(field, f'{field} is required'))
    if doc.get('type') and doc['type'] not in CLASS_TYPES:
        errors.append(_error('type', f"Type must be one of: {', '.join(CLASS_TYPES)}"))
    if doc.get('type') == 'live' and doc.get('schedule') is None:
        errors.append(_error('schedule', 'Schedule is required for live classes'))
    if not isinstance(doc.get('isActive', True), bool):
        errors.append(_error('isActive', 'isActive must be a boolean'))
    return errors


def _clean_class_fields(data):
    clean = {}
    errors = []
    for field in CLASS_WRITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == 'schedule':
            try:
                clean['schedule'] = parse_schedule(value)
            except ValueError:
                errors.append(_error('schedule', 'Schedule must be an ISO-8601 datetime'))
        elif field == 'isActive':
            clean['isActive'] = value
        else:
            clean[field] = _text(value)
    return clean, errors


def validate_class(data):
    """Validate a full class payload for creation"""
    clean, errors = _clean_class_fields(_as_dict(data))
    if not clean.get('thumbnail'):
        clean['thumbnail'] = DEFAULT_THUMBNAIL
    clean.setdefault('isActive', True)
    clean.setdefault('schedule', None)
    if errors:
        return clean, errors
    return clean, _check_class(clean)


def validate_class_update(existing, data):
    """Validate a partial update against the stored class it will be merged into"""
    changes, errors = _clean_class_fields(_as_dict(data))
    if 'thumbnail' in changes and not changes['thumbnail']:
        changes['thumbnail'] = DEFAULT_THUMBNAIL
    if errors:
        return changes, errors
    merged = dict(existing)
    merged.update(changes)
    return changes, _check_class(merged)
