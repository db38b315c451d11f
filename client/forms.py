"""Client-side checks run before a form is sent to the API"""
import re

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 6


class FormError(Exception):
    def __init__(self, errors):
        super().__init__('; '.join(errors))
        self.errors = errors


def check_registration(name, email, password, confirm_password):
    errors = []
    if not (name or '').strip():
        errors.append('Name is required')
    if not EMAIL_RE.match((email or '').strip()):
        errors.append('Enter a valid email address')
    if password != confirm_password:
        errors.append('Passwords do not match')
    if len(password or '') < MIN_PASSWORD_LENGTH:
        errors.append(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    if errors:
        raise FormError(errors)
    return {'name': name.strip(), 'email': email.strip(), 'password': password}


def check_login(email, password):
    errors = []
    if not EMAIL_RE.match((email or '').strip()):
        errors.append('Enter a valid email address')
    if not password:
        errors.append('Password is required')
    if errors:
        raise FormError(errors)
    return {'email': email.strip(), 'password': password}


def class_form(title=None, description=None, instructor=None, class_type=None, video_url=None,
               thumbnail=None, duration=None, category=None, schedule=None, active=None,
               partial=False):
    """Collect class fields into an API payload.

    For creation every required field must be present; with partial=True only
    the given fields are sent. A live class always needs a schedule.
    """
    fields = {
        'title': title,
        'description': description,
        'instructor': instructor,
        'type': class_type,
        'videoUrl': video_url,
        'thumbnail': thumbnail,
        'duration': duration,
        'category': category,
        'schedule': schedule,
        'isActive': active,
    }
    payload = {k: v for k, v in fields.items() if v is not None}
    errors = []
    if not partial:
        for key in ('title', 'description', 'instructor', 'type', 'videoUrl', 'duration', 'category'):
            if not payload.get(key):
                errors.append(f'{key} is required')
    if payload.get('type') not in (None, 'live', 'recorded'):
        errors.append('type must be live or recorded')
    if payload.get('type') == 'live' and not payload.get('schedule'):
        errors.append('schedule is required for live classes')
    if partial and not payload:
        errors.append('Nothing to update')
    if errors:
        raise FormError(errors)
    return payload


def user_form(name=None, email=None, role=None):
    payload = {k: v for k, v in (('name', name), ('email', email), ('role', role)) if v is not None}
    errors = []
    if 'email' in payload and not EMAIL_RE.match(payload['email'].strip()):
        errors.append('Enter a valid email address')
    if 'role' in payload and payload['role'] not in ('student', 'admin'):
        errors.append('role must be student or admin')
    if not payload:
        errors.append('Nothing to update')
    if errors:
        raise FormError(errors)
    return payload
