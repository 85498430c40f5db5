from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.services import auth
from app.services.auth import get_token_claims
from app.services.profile import get_profile


router = APIRouter()


class SignupBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(default=None, alias="confirmPassword")


@router.post("/signup", status_code=201)
def signup(body: SignupBody) -> dict:
    """PUBLIC: Register a user and return a token so the client is logged in."""
    token, user = auth.register(body.name, body.email, body.password, body.confirm_password)
    return {
        "success": True,
        "message": "Account created successfully.",
        "token": token,
        "user": user.to_public(),
    }


class SigninBody(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/signin")
def signin(body: SigninBody) -> dict:
    """PUBLIC: Exchange email and password for a fresh token."""
    token, user = auth.authenticate(body.email, body.password)
    return {
        "success": True,
        "message": "Signed in successfully.",
        "token": token,
        "user": user.to_public(),
    }


@router.get("/profile")
def profile(claims: dict = Depends(get_token_claims)) -> dict:
    """PROTECTED: Current user's profile, without the password."""
    return {"success": True, "user": get_profile(claims).to_public()}
