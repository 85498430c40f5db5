"""Feedback submission: validate once, then append to the log store and the mirror.

The document store is written first. The spreadsheet row is only appended
after that insert succeeds, and the document records whether it made it into
the mirror so drift can be measured and repaired with `resync_mirror`.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from app.models.feedback import Feedback
from app.services.feedback_mirror import FeedbackMirror, MirrorRow
from app.services.validation import parse_rating, validate_feedback
from app.utils.base import MirrorStatus, PersistenceError, ValidationError
from app.utils.config import settings


logger = logging.getLogger(__name__)

SAVE_FAILED = "Server error: Unable to save feedback. Please try again later."
_UNSYNCED = [MirrorStatus.PENDING.value, MirrorStatus.FAILED.value]


def get_mirror() -> FeedbackMirror:
    return FeedbackMirror(settings.feedback_excel_path, tz_name=settings.feedback_timezone)


def _row_of(entry: Feedback) -> MirrorRow:
    return MirrorRow(
        name=entry.name,
        email=entry.email,
        rating=entry.rating,
        message=entry.message,
        submitted_at=entry.submitted_at,
    )


def _mark(entry: Feedback, status: MirrorStatus) -> None:
    entry.mirror_status = status.value
    entry.mirrored_at = datetime.now(timezone.utc) if status is MirrorStatus.SYNCED else None
    entry.save()


def submit_feedback(name: Any, email: Any, rating: Any, message: Any) -> Feedback:
    """Record one feedback entry in both targets.

    Raises ValidationError before touching either target, PersistenceError if
    either write fails. A completed store insert is not rolled back when the
    mirror append fails; the entry stays marked `failed` instead.
    """
    errors = validate_feedback(name, email, rating, message)
    if errors:
        raise ValidationError(errors)

    entry = Feedback(
        name=name.strip(),
        email=email.strip(),
        rating=parse_rating(rating),
        message=message.strip(),
        submitted_at=datetime.now(timezone.utc),
    )

    if settings.feedback_store_enabled:
        try:
            entry.save()
        except (PyMongoError, DocumentValidationError) as exc:
            logger.error("Feedback insert failed for %s: %s", entry.email, exc, exc_info=True)
            raise PersistenceError(SAVE_FAILED)

    try:
        rows = get_mirror().append(_row_of(entry))
    except Exception as exc:
        logger.error("Feedback mirror append failed for %s: %s", entry.email, exc, exc_info=True)
        if settings.feedback_store_enabled:
            try:
                _mark(entry, MirrorStatus.FAILED)
            except PyMongoError:
                logger.error("Could not flag feedback %s as unmirrored", entry.id, exc_info=True)
        raise PersistenceError(SAVE_FAILED)

    if settings.feedback_store_enabled:
        try:
            _mark(entry, MirrorStatus.SYNCED)
        except PyMongoError as exc:
            # Row is already in the sheet; a later resync would duplicate it
            logger.error("Could not flag feedback %s as mirrored: %s", entry.id, exc, exc_info=True)
            raise PersistenceError(SAVE_FAILED)

    logger.info("Feedback saved from %s (%d rows in mirror)", entry.email, rows)
    return entry


def mirror_lag() -> int:
    """Number of stored feedback entries not yet present in the mirror."""
    try:
        return Feedback.objects(mirror_status__in=_UNSYNCED).count()
    except PyMongoError as exc:
        logger.error("Could not count unmirrored feedback: %s", exc, exc_info=True)
        raise PersistenceError("Server error")


def resync_mirror(limit: int | None = None) -> int:
    """Append every pending/failed entry to the mirror, oldest first.

    Returns how many entries were mirrored.
    """
    if limit is not None and limit <= 0:
        return 0
    pending = Feedback.objects(mirror_status__in=_UNSYNCED).order_by("submitted_at")
    if limit is not None:
        pending = pending.limit(limit)
    entries = list(pending)
    if not entries:
        return 0

    get_mirror().append_many([_row_of(entry) for entry in entries])
    for entry in entries:
        _mark(entry, MirrorStatus.SYNCED)
    logger.info("Resynced %d feedback entries to the mirror", len(entries))
    return len(entries)
