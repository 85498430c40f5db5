from __future__ import annotations

import logging
from typing import Any

from bson.errors import InvalidId
from mongoengine import NotUniqueError
from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from app.models.user import User
from app.services.validation import normalize_email, parse_date, validate_profile
from app.utils.base import ConflictError, NotFoundError, PersistenceError, ValidationError


logger = logging.getLogger(__name__)


def get_profile(claims: dict) -> User:
    """Load the user named by the token subject."""
    try:
        user = User.objects(id=claims["sub"]).first()
    except (InvalidId, DocumentValidationError):
        user = None
    except PyMongoError as exc:
        logger.error("Profile lookup failed: %s", exc, exc_info=True)
        raise PersistenceError("Server error")
    if not user:
        raise NotFoundError("User not found")
    return user


def update_profile(claims: dict, **fields: Any) -> User:
    """Overwrite the profile fields of the token's user.

    The body email is a new value for that user, never a lookup key: if it
    belongs to somebody else the update is refused.
    """
    errors = validate_profile(fields)
    if errors:
        raise ValidationError(errors)

    user = get_profile(claims)
    email = normalize_email(fields["email"])
    try:
        if email != user.email and User.objects(email=email, id__ne=user.id).first():
            raise ConflictError("Email already registered")

        user.first_name = fields["first_name"].strip()
        user.last_name = fields["last_name"].strip()
        user.name = f"{user.first_name} {user.last_name}".strip()
        user.email = email
        user.address = fields["address"].strip()
        user.bio = fields["bio"].strip()
        user.dob = parse_date(fields["dob"])
        user.mobile = fields["mobile"].strip()
        user.save()
    except NotUniqueError:
        raise ConflictError("Email already registered")
    except DocumentValidationError as exc:
        raise ValidationError(str(exc))
    except PyMongoError as exc:
        logger.error("Profile update failed for %s: %s", user.id, exc, exc_info=True)
        raise PersistenceError("Server error")

    logger.info("Profile updated for %s", user.id)
    return user
