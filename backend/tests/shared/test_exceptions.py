"""Tests for shared/exceptions.py."""

from shared.exceptions import ErrorCode, ExternalServiceError, PurdueRideError


class TestPurdueRideError:
    def test_message(self):
        """PurdueRideError should store message."""
        error = PurdueRideError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """Code should default to the class name."""
        error = PurdueRideError("Test error")
        assert error.code == "PurdueRideError"

    def test_custom_code(self):
        error = PurdueRideError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_error_code_enum_is_unwrapped(self):
        """ErrorCode members should be stored as their string value."""
        error = PurdueRideError("Ride not found", code=ErrorCode.RIDE_NOT_FOUND)
        assert error.code == "RIDE_NOT_FOUND"
        assert not isinstance(error.code, ErrorCode)

    def test_default_details(self):
        assert PurdueRideError("Test error").details == {}

    def test_to_dict(self):
        """PurdueRideError should convert to dict."""
        error = PurdueRideError("Test error", code="TEST_ERROR", details={"key": "value"})
        result = error.to_dict()

        assert result["error"] == "TEST_ERROR"
        assert result["message"] == "Test error"
        assert result["details"]["key"] == "value"


class TestExternalServiceError:
    def test_inherits_base(self):
        error = ExternalServiceError("Connection failed", service="mock_api")
        assert isinstance(error, PurdueRideError)

    def test_includes_service_in_details(self):
        """ExternalServiceError should include service in details."""
        error = ExternalServiceError("Connection failed", service="mock_api")
        assert error.service == "mock_api"
        assert error.to_dict()["details"]["service"] == "mock_api"

    def test_preserves_other_details(self):
        error = ExternalServiceError(
            "Connection failed",
            service="supabase",
            details={"status_code": 500},
        )
        result = error.to_dict()

        assert result["details"]["service"] == "supabase"
        assert result["details"]["status_code"] == 500


class TestErrorCode:
    def test_codes_are_their_own_names(self):
        for code in ErrorCode:
            assert code.value == code.name

    def test_codes_compare_as_strings(self):
        assert ErrorCode.AUTH_EMAIL_IN_USE == "AUTH_EMAIL_IN_USE"
