"""
Tests for ServiceResult.
"""

from core.services import ServiceResult


class TestServiceResult:
    """Tests for ServiceResult."""

    def test_ok(self):
        result = ServiceResult.ok({"id": 1})

        assert result
        assert result.success is True
        assert result.data == {"id": 1}
        assert result.error is None

    def test_failure(self):
        result = ServiceResult.failure(
            "IPN has no subscription id",
            error_code="MISSING_SUBSCRIPTION_ID",
        )

        assert not result
        assert result.data is None
        assert result.error == "IPN has no subscription id"
        assert result.error_code == "MISSING_SUBSCRIPTION_ID"

    def test_failure_without_code(self):
        assert ServiceResult.failure("Invalid").error_code is None
