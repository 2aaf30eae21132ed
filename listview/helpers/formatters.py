"""
Display helpers for roles, groups, users and membership audit rows.

These only format values for the renderer; they never decide what is fetched.
"""

from datetime import datetime, timezone
from typing import Optional

GROUP_TYPE_LABELS = {
    'okta_group': 'Group',
    'role_group': 'Role',
    'app_group': 'App Group',
}

DATE_FORMAT = '%b %d, %Y'


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the backend into an aware datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def display_user_name(user: Optional[dict]) -> str:
    if not user:
        return ''
    if user.get('display_name'):
        return user['display_name']
    full_name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
    return full_name or user.get('email') or ''


def display_group_type(group: Optional[dict]) -> str:
    if not group:
        return ''
    group_type = group.get('type') or ''
    return GROUP_TYPE_LABELS.get(group_type, group_type.replace('_', ' ').title())


def truncate_description(text: Optional[str], max_length: int = 115) -> str:
    """Shorten long descriptions to max_length - 1 characters plus an ellipsis."""
    if not text:
        return ''
    if len(text) > max_length:
        return text[:max_length - 1] + '...'
    return text


def is_membership_active(row: dict, now: Optional[datetime] = None) -> bool:
    """A membership is active when it has no end date or ends in the future."""
    ended_at = parse_timestamp(row.get('ended_at'))
    if ended_at is None:
        return True
    return (now or datetime.now(timezone.utc)) < ended_at


def has_ended(row: dict, now: Optional[datetime] = None) -> bool:
    return not is_membership_active(row, now)


def format_started(row: dict) -> str:
    started = parse_timestamp(row.get('created_at'))
    return started.strftime(DATE_FORMAT) if started else ''


def format_ending(row: dict, now: Optional[datetime] = None) -> str:
    ended_at = parse_timestamp(row.get('ended_at'))
    if ended_at is None:
        return 'Never'
    label = ended_at.strftime(DATE_FORMAT)
    if is_membership_active(row, now):
        return f"Ends {label}"
    return label


def format_created_reason(reason: Optional[str], max_length: int = 115) -> str:
    return truncate_description((reason or '').strip(), max_length)


def format_total(total: int, noun: str = 'result') -> str:
    return f"{total} {noun}" + ('' if total == 1 else 's')
