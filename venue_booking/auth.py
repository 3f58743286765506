"""Administrator credentials and bearer tokens.

Passwords are stored as salted werkzeug hashes. Session tokens are
itsdangerous-signed payloads carrying the admin id, email and an expiry
timestamp; every administrator-only operation takes the resulting
``AdminIdentity`` as an explicit argument.
"""

import logging
import time
from dataclasses import dataclass
from functools import cache, wraps

from flask import current_app, request
from itsdangerous import BadSignature, URLSafeSerializer
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import AuthenticationError, ValidationError, translate_integrity_error
from .models import Admin
from .validation import check_email, check_required, check_string, ensure

logger = logging.getLogger(__name__)

TOKEN_SALT = "venue-booking-admin-session"
DEFAULT_TOKEN_TTL = 24 * 60 * 60


@cache
def _placeholder_hash() -> str:
    return generate_password_hash("placeholder-credential")


@dataclass(frozen=True)
class AdminIdentity:
    """Proof that the caller presented a valid administrator token."""

    admin_id: int
    email: str


def require_admin(admin) -> AdminIdentity:
    if not isinstance(admin, AdminIdentity):
        raise AuthenticationError("Access denied. No token provided.")
    return admin


class TokenSigner:
    def __init__(self, secret_key: str, ttl: int = DEFAULT_TOKEN_TTL) -> None:
        self._serializer = URLSafeSerializer(secret_key, salt=TOKEN_SALT)
        self._ttl = ttl

    def issue(self, admin: Admin) -> str:
        """Generates a signed, time-limited token for an administrator."""
        payload = {
            "admin_id": admin.id,
            "email": admin.email,
            "exp": int(time.time()) + self._ttl,
        }
        return self._serializer.dumps(payload)

    def verify(self, token: str) -> AdminIdentity | None:
        """Verifies the token signature and checks for expiration."""
        try:
            data = self._serializer.loads(token)
        except BadSignature:
            return None  # invalid or tampered with

        if not isinstance(data, dict) or data.get("exp", 0) < time.time():
            return None  # expired
        if "admin_id" not in data or "email" not in data:
            return None
        return AdminIdentity(admin_id=data["admin_id"], email=data["email"])


class AuthService:
    """Registration and login for the single administrator role."""

    def __init__(self, session, signer: TokenSigner) -> None:
        self._session = session
        self._signer = signer

    def _find(self, email):
        return self._session.execute(
            select(Admin).where(Admin.email == email)
        ).scalar_one_or_none()

    def register(self, data) -> Admin:
        data = data if isinstance(data, dict) else {}
        ensure(
            check_required(data, ("email", "password")),
            check_email(data.get("email")),
            check_string(data.get("password"), "password"),
        )
        email = data["email"].strip()
        if self._find(email) is not None:
            raise ValidationError("Admin already exists")

        admin = Admin(email=email, password_hash=generate_password_hash(data["password"]))
        self._session.add(admin)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise translate_integrity_error(exc) from exc
        logger.info("Administrator %s registered", admin.id)
        return admin

    def login(self, data) -> tuple[str, Admin]:
        record = data if isinstance(data, dict) else {}
        email = record.get("email")
        password = record.get("password")
        admin = self._find(email.strip()) if isinstance(email, str) else None
        password = password if isinstance(password, str) else ""

        # Unknown emails still pay for a hash check; both failures look the same
        stored = admin.password_hash if admin is not None else _placeholder_hash()
        if not check_password_hash(stored, password) or admin is None:
            logger.warning("Failed administrator login")
            raise AuthenticationError("Invalid credentials")

        logger.info("Administrator %s logged in", admin.id)
        return self._signer.issue(admin), admin

    def authenticate(self, authorization: str | None) -> AdminIdentity:
        """Resolve an ``Authorization: Bearer <token>`` header to an identity."""
        if not authorization:
            raise AuthenticationError("Access denied. No token provided.")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Invalid token")
        identity = self._signer.verify(token.strip())
        if identity is None:
            logger.warning("Rejected invalid or expired token")
            raise AuthenticationError("Invalid token")
        return identity


def admin_required(view):
    """Authenticate the request and pass the AdminIdentity as the first argument."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        auth = current_app.extensions["venue_booking"].auth
        admin = auth.authenticate(request.headers.get("Authorization"))
        return view(admin, *args, **kwargs)

    return wrapper
