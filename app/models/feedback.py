from mongoengine import DateTimeField, IntField, StringField

from app.models.base import BaseDocument, utcnow
from app.services.validation import EMAIL_PATTERN
from app.utils.base import MirrorStatus


class Feedback(BaseDocument):
    """Feedback log entry.

    Append-only: entries are inserted once and only their mirror bookkeeping
    changes afterwards. Email is deliberately not unique.

    Fields:
    - name/email/message (str): Trimmed submission values
    - rating (int): 1..5
    - submitted_at (datetime): UTC submission time
    - mirror_status (str): pending/synced/failed for the spreadsheet mirror
    - mirrored_at (datetime|None): when the row reached the mirror
    """
    name = StringField(required=True, null=False, min_length=2)
    email = StringField(required=True, null=False, regex=EMAIL_PATTERN)
    rating = IntField(required=True, null=False, min_value=1, max_value=5)
    message = StringField(required=True, null=False, min_length=5)
    submitted_at = DateTimeField(required=True, null=False, default=utcnow)

    mirror_status = StringField(
        required=True,
        null=False,
        choices=MirrorStatus.choices(),
        default=MirrorStatus.PENDING.value,
    )
    mirrored_at = DateTimeField(required=False, null=True)

    meta = {
        "collection": "feedback",
        "indexes": [
            {"fields": ["email"]},
            {"fields": ["mirror_status", "submitted_at"]},
        ],
    }
