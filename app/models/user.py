from mongoengine import DateField, StringField
from app.models.base import BaseDocument
from app.services.validation import EMAIL_PATTERN


DEFAULT_BIO = "Hello, I am a valued customer."
DEFAULT_ADDRESS = "xyz city, abc country"


class User(BaseDocument):
    """User document (the credential store).

    Fields:
    - name (str): Display name given at signup
    - first_name/last_name (str): Profile names
    - email (str, unique): Login identifier, stored stripped and lower-cased
    - password (str, hashed): Bcrypt-hashed password, never returned
    - mobile/dob/bio/address: Optional profile fields
    """
    name = StringField(required=True, null=False)
    first_name = StringField(required=True, null=False)
    last_name = StringField(required=False, default="")
    email = StringField(required=True, null=False, unique=True, regex=EMAIL_PATTERN)
    password = StringField(required=True, null=False)
    mobile = StringField(required=False, null=True)
    dob = DateField(required=False, null=True)
    bio = StringField(required=False, default=DEFAULT_BIO)
    address = StringField(required=False, default=DEFAULT_ADDRESS)

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
        ],
    }

    def to_public(self) -> dict:
        """Public-safe projection of the user; the password hash never leaves the store."""
        return {
            "id": str(self.id),
            "name": self.name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "mobile": self.mobile,
            "dob": self._sanitize_value(self.dob),
            "bio": self.bio,
            "address": self.address,
            "createdAt": self._sanitize_value(self.created_at),
        }
