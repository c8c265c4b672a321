"""Tests for the gateway error-code table and classification enums."""

import pytest

from payment_recovery.core.errors import (
    ERROR_CODE_MAP,
    ErrorAction,
    ErrorCategory,
    ErrorMapping,
    Severity,
    lookup_error_code,
)


class TestErrorCategoryEnum:
    """Tests for the ErrorCategory enum."""

    def test_categories_are_closed_set(self) -> None:
        assert {c.value for c in ErrorCategory} == {
            "USER_ERROR",
            "BUSINESS_ERROR",
            "TECHNICAL_ERROR",
            "USER_DROPPED",
            "VALIDATION_ERROR",
            "UNKNOWN_ERROR",
        }

    def test_values_match_names(self) -> None:
        """Category values serialize as their names."""
        for category in ErrorCategory:
            assert category.value == category.name

    def test_category_is_string_enum(self) -> None:
        assert ErrorCategory.TECHNICAL_ERROR == "TECHNICAL_ERROR"


class TestErrorActionEnum:
    """Tests for the ErrorAction enum."""

    def test_actions_are_closed_set(self) -> None:
        assert {a.value for a in ErrorAction} == {
            "RETRY",
            "RE_ENTER_DETAILS",
            "CONTACT_SUPPORT",
            "TRY_ANOTHER_METHOD",
            "CHECK_BALANCE",
            "CONTACT_BANK",
            "NONE",
        }

    def test_severity_values(self) -> None:
        assert [s.value for s in Severity] == ["error", "warning", "info"]


class TestErrorCodeMap:
    """Tests for ERROR_CODE_MAP contents."""

    def test_table_has_eighteen_codes(self) -> None:
        assert len(ERROR_CODE_MAP) == 18

    def test_every_entry_is_error_mapping(self) -> None:
        for code, mapping in ERROR_CODE_MAP.items():
            assert isinstance(mapping, ErrorMapping), code
            assert mapping.user_message, f"{code} has no user message"

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ERROR_CODE_MAP["NEW_CODE"] = ERROR_CODE_MAP["GATEWAY_ERROR"]  # type: ignore[index]

    @pytest.mark.parametrize(
        ("code", "category", "action", "retryable"),
        [
            ("INVALID_CARD_NUMBER", ErrorCategory.USER_ERROR, ErrorAction.RE_ENTER_DETAILS, True),
            ("CARD_EXPIRED", ErrorCategory.USER_ERROR, ErrorAction.TRY_ANOTHER_METHOD, False),
            ("INVALID_VPA", ErrorCategory.USER_ERROR, ErrorAction.RE_ENTER_DETAILS, True),
            ("INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_ERROR, ErrorAction.CHECK_BALANCE, False),
            ("BANK_DECLINED", ErrorCategory.BUSINESS_ERROR, ErrorAction.CONTACT_BANK, False),
            ("GATEWAY_TIMEOUT", ErrorCategory.TECHNICAL_ERROR, ErrorAction.RETRY, True),
            ("SERVICE_UNAVAILABLE", ErrorCategory.TECHNICAL_ERROR, ErrorAction.RETRY, True),
            ("TRANSACTION_CANCELLED", ErrorCategory.USER_DROPPED, ErrorAction.NONE, True),
            ("SESSION_EXPIRED", ErrorCategory.USER_DROPPED, ErrorAction.RETRY, True),
            ("INVALID_AMOUNT", ErrorCategory.VALIDATION_ERROR, ErrorAction.CONTACT_SUPPORT, False),
        ],
    )
    def test_representative_entries(
        self,
        code: str,
        category: ErrorCategory,
        action: ErrorAction,
        retryable: bool,
    ) -> None:
        mapping = ERROR_CODE_MAP[code]
        assert mapping.category == category
        assert mapping.action == action
        assert mapping.retryable is retryable

    def test_technical_codes_are_all_retryable(self) -> None:
        technical = [m for m in ERROR_CODE_MAP.values() if m.category == ErrorCategory.TECHNICAL_ERROR]
        assert len(technical) == 4
        assert all(m.retryable and m.action == ErrorAction.RETRY for m in technical)

    def test_business_codes_are_never_retryable(self) -> None:
        business = [m for m in ERROR_CODE_MAP.values() if m.category == ErrorCategory.BUSINESS_ERROR]
        assert business
        assert not any(m.retryable for m in business)


class TestLookupErrorCode:
    """Tests for lookup_error_code()."""

    def test_known_code(self) -> None:
        assert lookup_error_code("GATEWAY_ERROR") is ERROR_CODE_MAP["GATEWAY_ERROR"]

    @pytest.mark.parametrize("code", [None, "", "NOT_A_CODE", "gateway_error"])
    def test_unknown_or_missing_code(self, code: str | None) -> None:
        assert lookup_error_code(code) is None
