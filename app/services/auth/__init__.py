import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from jose import jwt, JWTError
from mongoengine import NotUniqueError
from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from app.models.user import User
from app.services import sessions
from app.services.validation import normalize_email, validate_signin, validate_signup
from app.utils.base import AuthError, ConflictError, PersistenceError, ValidationError
from app.utils.config import settings


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/signin", auto_error=False)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def create_token(user: User, expires_delta: timedelta | None = None) -> tuple[str, datetime]:
    """Create a signed access JWT for a user, returns (token, expires_at)."""
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_delta or timedelta(days=settings.access_token_expires_days))
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "typ": "access",
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_at


def verify_token(token: str | None) -> dict:
    """Check signature, expiry and token type; return the claims.

    The user record is not loaded here, callers look it up by `sub` if needed.
    """
    if not token:
        raise AuthError("No token provided")
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthError(INVALID_TOKEN)
    if not payload.get("sub") or payload.get("typ") != "access":
        raise AuthError(INVALID_TOKEN)
    return payload


def get_token_claims(token: str | None = Depends(oauth2_scheme)) -> dict:
    """Auth dependency for protected routes."""
    return verify_token(token)


def get_optional_token_claims(token: str | None = Depends(oauth2_scheme)) -> dict | None:
    """Auth dependency for routes where a token is only checked when sent."""
    if token is None:
        return None
    return verify_token(token)


def _issue(user: User) -> str:
    token, expires_at = create_token(user)
    sessions.record_session(str(user.id), expires_at)
    return token


def register(name: str | None, email: str | None, password: str | None, confirm_password: str | None) -> tuple[str, User]:
    errors = validate_signup(name, email, password, confirm_password)
    if errors:
        raise ValidationError(errors)

    email = normalize_email(email)
    name = name.strip()
    try:
        # Reject duplicate email signups early; the unique index still guards races
        if User.objects(email=email).first():
            raise ConflictError("Email already registered")
        first_name, _, last_name = name.partition(" ")
        user = User(
            name=name,
            first_name=first_name,
            last_name=last_name.strip(),
            email=email,
            password=hash_password(password),
        )
        user.save()
    except NotUniqueError:
        raise ConflictError("Email already registered")
    except DocumentValidationError as exc:
        raise ValidationError(str(exc))
    except PyMongoError as exc:
        logger.error("Signup failed for %s: %s", email, exc, exc_info=True)
        raise PersistenceError("Server error")

    logger.info("Registered user %s", user.id)
    return _issue(user), user


def authenticate(email: str | None, password: str | None) -> tuple[str, User]:
    errors = validate_signin(email, password)
    if errors:
        raise ValidationError(errors)

    try:
        user = User.objects(email=normalize_email(email)).first()
    except PyMongoError as exc:
        logger.error("Signin lookup failed: %s", exc, exc_info=True)
        raise PersistenceError("Server error")

    # Same message whether the email or the password is wrong
    if not user or not verify_password(password, user.password):
        raise AuthError(INVALID_CREDENTIALS)
    return _issue(user), user
