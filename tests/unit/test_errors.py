"""Unit tests for the client error taxonomy."""

import pytest

from heritage.models import (
    AuthenticationError,
    AuthorizationError,
    ErrorCode,
    HeritageError,
    InvalidTransitionError,
    LoginRequiredError,
    SessionExpiredError,
    TransportError,
    ValidationError,
    translate_transport_error,
)


class TestHeritageError:
    """Tests for code, message and recovery defaults."""

    def test_defaults_from_error_tables(self) -> None:
        error = ValidationError(ErrorCode.DATE_REQUIRED)

        assert error.code == ErrorCode.DATE_REQUIRED
        assert error.message == "Please select a visit date."
        assert error.recovery == "Pick a date from the calendar"
        assert str(error) == error.message

    def test_explicit_message_wins(self) -> None:
        error = AuthenticationError(message="User not found")

        assert error.code == ErrorCode.INVALID_CREDENTIALS
        assert error.message == "User not found"

    def test_to_error_info(self) -> None:
        error = AuthorizationError(details={"path": "/admin/users"})

        info = error.to_error_info()

        assert info.success is False
        assert info.error_code == ErrorCode.ADMIN_REQUIRED
        assert info.message == "Admins only"
        assert info.recovery == "Ask an administrator for access"
        assert info.details == {"path": "/admin/users"}

    def test_to_error_info_keeps_backend_message(self) -> None:
        error = ValidationError(message="User already exists")

        info = error.to_error_info()

        assert info.error_code == ErrorCode.INVALID_INPUT
        assert info.message == "User already exists"
        assert info.recovery == "Correct the highlighted fields and try again"
        assert info.details is None

    def test_login_required_carries_return_target(self) -> None:
        error = LoginRequiredError(return_to="/booking")

        assert isinstance(error, AuthenticationError)
        assert error.login_path == "/login"
        assert error.return_to == "/booking"
        assert error.details == {"return_to": "/booking"}

    def test_invalid_transition_is_validation_error(self) -> None:
        assert issubclass(InvalidTransitionError, ValidationError)
        assert issubclass(SessionExpiredError, AuthenticationError)


class TestTranslateTransportError:
    """Tests for mapping HTTP statuses onto the taxonomy."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (401, SessionExpiredError),
            (403, AuthorizationError),
            (400, ValidationError),
            (409, ValidationError),
            (422, ValidationError),
        ],
    )
    def test_status_mapping(self, status: int, expected: type[HeritageError]) -> None:
        error = TransportError(backend_message="Backend says no", status_code=status)

        translated = translate_transport_error(error)

        assert type(translated) is expected
        assert translated.message == "Backend says no"

    def test_missing_backend_message_uses_default(self) -> None:
        translated = translate_transport_error(TransportError(status_code=409))

        assert translated.code == ErrorCode.INVALID_INPUT
        assert translated.message == "The submitted data is invalid"

    @pytest.mark.parametrize("status", [None, 404, 500, 503])
    def test_other_statuses_stay_transport_errors(self, status: int | None) -> None:
        error = TransportError(ErrorCode.NETWORK_ERROR, status_code=status)

        assert translate_transport_error(error) is error
