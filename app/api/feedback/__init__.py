from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.services.auth import get_optional_token_claims
from app.services.feedback import submit_feedback
from app.utils.base import AuthError
from app.utils.config import settings


router = APIRouter()


def feedback_auth(claims: dict | None = Depends(get_optional_token_claims)) -> dict | None:
    """Tokens are always checked when sent, and required only if configured so."""
    if claims is None and settings.feedback_requires_auth:
        raise AuthError("No token provided")
    return claims


class FeedbackBody(BaseModel):
    # Loosely typed on purpose: every field is checked by validate_feedback
    name: Any = None
    email: Any = None
    rating: Any = None
    message: Any = None


@router.post("/feedback", dependencies=[Depends(feedback_auth)])
def post_feedback(body: FeedbackBody) -> dict:
    """PUBLIC unless configured otherwise: Record feedback in the log store and the spreadsheet mirror."""
    submit_feedback(body.name, body.email, body.rating, body.message)
    return {
        "success": True,
        "message": "Thank you! Your feedback has been saved successfully.",
    }
