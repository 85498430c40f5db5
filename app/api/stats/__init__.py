from fastapi import APIRouter

from app.services.feedback import mirror_lag
from app.services.sessions import count_active_sessions


router = APIRouter()


@router.get("/loggedInUsersCount")
def logged_in_users_count() -> dict:
    """PUBLIC: Users holding an unexpired session token."""
    return {"success": True, "count": count_active_sessions()}


@router.get("/feedbackMirrorLag")
def feedback_mirror_lag() -> dict:
    """PUBLIC: Stored feedback entries still missing from the spreadsheet mirror."""
    return {"success": True, "pending": mirror_lag()}
