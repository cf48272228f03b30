"""Authentication flow: login / registration state machine.

The flow validates credentials locally, talks to storage through the
UserRepository, and on success hands back only the user's identifier. No
session is persisted; every launch of the app starts logged out.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from food_journal.domain.alerts import VALIDATION_TITLE, Alert
from food_journal.domain.exceptions import ValidationError
from food_journal.logging import get_logger
from food_journal.logging.context import log_context
from food_journal.persistence.exceptions import PersistenceError
from food_journal.persistence.repositories import UserRepository
from food_journal.utils.hashing import DEFAULT_ITERATIONS, hash_password, verify_password

logger = get_logger(__name__, component="auth")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_TAKEN_MESSAGE = "Email already exists"


class AuthMode(str, Enum):
    """The two screens of the authentication flow."""

    LOGIN = "login"
    REGISTER = "register"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of one submit.

    Attributes:
        success: Whether the user is now identified
        user_id: Identifier to hand to the journal flow (only on success)
        alert: Message to show the user (only on failure)
    """

    success: bool
    user_id: Optional[int] = None
    alert: Optional[Alert] = None

    @classmethod
    def failed(cls, title: str, message: str) -> "AuthResult":
        return cls(success=False, alert=Alert(title=title, message=message))


def validate_credentials(
    email: str,
    password: str,
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
) -> str:
    """Check email and password without touching storage.

    Args:
        email: Email as typed
        password: Password as typed
        min_password_length: Minimum accepted password length

    Returns:
        The email with surrounding whitespace removed

    Raises:
        ValidationError: If a field is empty, the email is malformed or the
            password is too short
    """
    email = (email or "").strip()
    password = password or ""

    if not email or not password.strip():
        raise ValidationError("Please fill in all fields")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address", field="email")
    if len(password) < min_password_length:
        raise ValidationError(
            f"Password must be at least {min_password_length} characters", field="password"
        )
    return email


class AuthFlow:
    """Login / register state machine.

    Starts in LOGIN mode; toggle_mode() switches between the two modes.

    Example:
        >>> flow = AuthFlow(UserRepository(gateway))
        >>> flow.toggle_mode()
        >>> flow.submit("a@b.com", "secret1").user_id
        1
    """

    def __init__(
        self,
        users: UserRepository,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        hash_iterations: int = DEFAULT_ITERATIONS,
    ):
        self.users = users
        self.min_password_length = min_password_length
        self.hash_iterations = hash_iterations
        self.mode = AuthMode.LOGIN

    def toggle_mode(self) -> AuthMode:
        """Switch between LOGIN and REGISTER and return the new mode."""
        self.mode = AuthMode.REGISTER if self.mode is AuthMode.LOGIN else AuthMode.LOGIN
        return self.mode

    def submit(self, email: str, password: str) -> AuthResult:
        """Run the current mode's transition with the given credentials.

        Storage failures are logged and reported as a generic error; they
        never propagate to the caller.

        Args:
            email: Email as typed
            password: Password as typed

        Returns:
            AuthResult carrying the user id on success, an alert otherwise
        """
        try:
            email = validate_credentials(email, password, self.min_password_length)
        except ValidationError as e:
            return AuthResult.failed(VALIDATION_TITLE, e.message)

        try:
            if self.mode is AuthMode.LOGIN:
                return self._login(email, password)
            return self._register(email, password)
        except PersistenceError as e:
            logger.error(
                f"Authentication failed with storage error: {e}",
                extra={
                    "event": f"auth.{self.mode.value}.error",
                    "error_type": type(e).__name__,
                },
            )
            return AuthResult(success=False, alert=Alert.unexpected())

    def _login(self, email: str, password: str) -> AuthResult:
        user = self.users.get_by_email(email)

        # Same message for unknown email and wrong password
        if user is None or not verify_password(password, user.password_hash):
            logger.info(
                "Login rejected",
                extra={"event": "auth.login.rejected"},
            )
            return AuthResult.failed("Authentication Failed", INVALID_CREDENTIALS_MESSAGE)

        with log_context(user_id=user.id):
            logger.info("Login succeeded", extra={"event": "auth.login.succeeded"})
        return AuthResult(success=True, user_id=user.id)

    def _register(self, email: str, password: str) -> AuthResult:
        user = self.users.create(email, hash_password(password, self.hash_iterations))

        if user is None:
            logger.info(
                "Registration rejected: email already registered",
                extra={"event": "auth.register.rejected"},
            )
            return AuthResult.failed("Registration Failed", EMAIL_TAKEN_MESSAGE)

        with log_context(user_id=user.id):
            logger.info("Registration succeeded", extra={"event": "auth.register.succeeded"})
        return AuthResult(success=True, user_id=user.id)
