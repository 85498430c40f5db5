from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.services.auth import get_token_claims
from app.services.profile import update_profile


router = APIRouter()


class UpdateProfileBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    address: str | None = None
    bio: str | None = None
    dob: str | None = None
    mobile: str | None = None


@router.post("/updateProfile")
def update_profile_route(
    body: UpdateProfileBody,
    claims: dict = Depends(get_token_claims),
) -> dict:
    """PROTECTED: Update the signed-in user's profile."""
    user = update_profile(claims, **body.model_dump())
    return {
        "success": True,
        "message": "Profile updated successfully.",
        "user": user.to_public(),
    }
