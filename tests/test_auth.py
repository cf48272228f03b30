"""Tests for the authentication flow."""

from unittest.mock import Mock

import pytest

from food_journal.auth import AuthFlow, AuthMode, AuthResult, validate_credentials
from food_journal.domain.alerts import UNEXPECTED_ERROR_MESSAGE, VALIDATION_TITLE
from food_journal.domain.exceptions import ValidationError
from food_journal.persistence import QueryError, UserRepository
from food_journal.utils.hashing import verify_password
from tests.helpers import make_gateway
from tests.helpers.fakes import TEST_HASH_ITERATIONS


@pytest.fixture
def users():
    gateway = make_gateway()
    yield UserRepository(gateway)
    gateway.close()


@pytest.fixture
def flow(users):
    return AuthFlow(users, hash_iterations=TEST_HASH_ITERATIONS)


def register(flow: AuthFlow, email: str, password: str) -> AuthResult:
    if flow.mode is not AuthMode.REGISTER:
        flow.toggle_mode()
    return flow.submit(email, password)


class TestValidateCredentials:
    """Tests for local credential checks."""

    def test_valid_credentials_return_stripped_email(self):
        """Test valid input passes and the email is trimmed."""
        assert validate_credentials("  a@b.com ", "secret1") == "a@b.com"

    @pytest.mark.parametrize(
        "email,password",
        [("", "secret1"), ("a@b.com", ""), ("   ", "secret1"), ("a@b.com", "      ")],
    )
    def test_empty_fields(self, email, password):
        """Test empty or whitespace-only fields are rejected first."""
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials(email, password)

        assert exc_info.value.message == "Please fill in all fields"

    @pytest.mark.parametrize("email", ["plainaddress", "a@b", "a b@c.com", "@b.com", "a@.com@x"])
    def test_malformed_email(self, email):
        """Test emails without the name@domain.tld shape are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials(email, "secret1")

        assert exc_info.value.message == "Please enter a valid email address"
        assert exc_info.value.field == "email"

    def test_short_password(self):
        """Test passwords under six characters are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials("a@b.com", "12345")

        assert exc_info.value.message == "Password must be at least 6 characters"
        assert exc_info.value.field == "password"

    def test_minimum_length_is_accepted(self):
        """Test a password of exactly the minimum length passes."""
        assert validate_credentials("a@b.com", "123456") == "a@b.com"

    def test_custom_minimum_length(self):
        """Test the minimum length is configurable."""
        with pytest.raises(ValidationError, match="at least 10"):
            validate_credentials("a@b.com", "secret123", min_password_length=10)


class TestAuthModes:
    """Tests for the login / register state machine."""

    def test_starts_in_login_mode(self, flow):
        """Test a new flow shows the login screen."""
        assert flow.mode is AuthMode.LOGIN

    def test_toggle_mode(self, flow):
        """Test toggling alternates between the two modes."""
        assert flow.toggle_mode() is AuthMode.REGISTER
        assert flow.toggle_mode() is AuthMode.LOGIN


class TestRegistration:
    """Tests for account creation."""

    def test_register_new_account(self, flow, users):
        """Test registering a fresh email identifies the new user."""
        result = register(flow, "a@b.com", "secret1")

        assert result.success is True
        assert result.user_id == 1
        assert result.alert is None

        stored = users.get_by_email("a@b.com")
        assert stored.id == result.user_id

    def test_password_is_stored_hashed(self, flow, users):
        """Test the stored credential is a hash, not the password."""
        register(flow, "a@b.com", "secret1")

        stored = users.get_by_email("a@b.com")

        assert stored.password_hash != "secret1"
        assert stored.password_hash.startswith("pbkdf2_sha256$")
        assert verify_password("secret1", stored.password_hash)

    def test_register_duplicate_email(self, flow, users):
        """Test a second account for the same email is refused."""
        register(flow, "a@b.com", "secret1")

        result = register(flow, "a@b.com", "another1")

        assert result.success is False
        assert result.user_id is None
        assert result.alert.title == "Registration Failed"
        assert result.alert.message == "Email already exists"
        assert users.count() == 1

    def test_register_validation_runs_before_storage(self):
        """Test invalid input never reaches the repository."""
        users = Mock(spec=UserRepository)
        flow = AuthFlow(users, hash_iterations=TEST_HASH_ITERATIONS)
        flow.toggle_mode()

        result = flow.submit("not-an-email", "secret1")

        assert result.alert.title == VALIDATION_TITLE
        users.create.assert_not_called()
        users.get_by_email.assert_not_called()

    def test_register_trims_email(self, flow, users):
        """Test surrounding whitespace is not stored."""
        register(flow, "  a@b.com  ", "secret1")

        assert users.get_by_email("a@b.com") is not None


class TestLogin:
    """Tests for logging in."""

    def test_login_success(self, flow):
        """Test correct credentials identify the registered user."""
        registered = register(flow, "a@b.com", "secret1")
        flow.toggle_mode()

        result = flow.submit("a@b.com", "secret1")

        assert result.success is True
        assert result.user_id == registered.user_id

    def test_login_wrong_password(self, flow):
        """Test a wrong password is refused with the generic message."""
        register(flow, "a@b.com", "secret1")
        flow.toggle_mode()

        result = flow.submit("a@b.com", "wrongpass")

        assert result.success is False
        assert result.alert.title == "Authentication Failed"
        assert result.alert.message == "Invalid email or password"

    def test_login_unknown_email_matches_wrong_password(self, flow):
        """Test an unknown email gives the same message as a wrong password."""
        register(flow, "a@b.com", "secret1")
        flow.toggle_mode()

        unknown = flow.submit("nobody@b.com", "secret1")
        wrong = flow.submit("a@b.com", "wrongpass")

        assert unknown.alert == wrong.alert

    def test_login_validation_error(self, flow):
        """Test empty fields are caught before storage."""
        result = flow.submit("", "")

        assert result.success is False
        assert result.alert.title == VALIDATION_TITLE
        assert result.alert.message == "Please fill in all fields"

    def test_login_with_corrupted_hash(self, flow, users):
        """Test a malformed stored hash never verifies."""
        users.create("a@b.com", "not-a-hash")

        result = flow.submit("a@b.com", "secret1")

        assert result.success is False
        assert result.alert.message == "Invalid email or password"


class TestStorageFailures:
    """Tests for storage errors during submit."""

    def test_login_storage_error(self):
        """Test a failing lookup becomes a generic error alert."""
        users = Mock(spec=UserRepository)
        users.get_by_email.side_effect = QueryError("disk I/O error")
        flow = AuthFlow(users, hash_iterations=TEST_HASH_ITERATIONS)

        result = flow.submit("a@b.com", "secret1")

        assert result.success is False
        assert result.alert.message == UNEXPECTED_ERROR_MESSAGE

    def test_register_storage_error(self):
        """Test a failing insert becomes a generic error alert."""
        users = Mock(spec=UserRepository)
        users.create.side_effect = QueryError("database is locked")
        flow = AuthFlow(users, hash_iterations=TEST_HASH_ITERATIONS)
        flow.toggle_mode()

        result = flow.submit("a@b.com", "secret1")

        assert result.success is False
        assert result.user_id is None
        assert result.alert.message == UNEXPECTED_ERROR_MESSAGE


class TestScenarios:
    """End-to-end account scenarios."""

    def test_register_twice_keeps_one_row(self, flow, users):
        """Test the first registration gets id 1 and a repeat is refused."""
        first = register(flow, "a@b.com", "secret1")
        second = register(flow, "a@b.com", "other12")

        assert first.success and first.user_id == 1
        assert second.success is False
        assert second.alert.message == "Email already exists"
        assert users.count() == 1

    def test_login_wrong_password_is_generic(self, flow):
        """Test the failure message does not reveal whether the email exists."""
        register(flow, "a@b.com", "secret1")
        flow.toggle_mode()

        result = flow.submit("a@b.com", "wrongpass")

        assert result.alert.message == "Invalid email or password"
        assert "a@b.com" not in result.alert.message
