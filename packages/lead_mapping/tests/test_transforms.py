"""Tests for lead field transforms."""

import copy

import pytest
from lead_mapping.transforms import (
    PLACEHOLDER,
    digits_only,
    format_call_type,
    format_duration,
    format_list,
    format_phone,
    format_timestamp,
    lead_comments,
    lead_name,
    lead_phone,
    parse_timestamp,
)

# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def full_document() -> dict:
    """Webhook document with every field the summary reads."""
    return {
        "contact": {
            "phone": "+7 (900) 123-45-67",
            "tags": ["hot", "callback"],
            "dadataPhoneInfo": {
                "region": "Москва",
                "provider": "МТС",
                "timezone": "UTC+3",
            },
            "additionalFields": {
                "website": "example.ru",
                "page": "/pricing",
                "ip": "203.0.113.7",
            },
        },
        "call": {
            "duration": 125000,
            "startedAt": "2025-01-15T09:05:00Z",
            "endedAt": "2025-01-15T09:07:05Z",
            "type": "outgoing",
            "status": "completed",
            "hangupReason": "client",
            "agreements": {
                "client_name": "Анна",
                "agreements": "Перезвонить завтра",
                "client_facts": "Интересуется тарифом",
                "smsText": "Спасибо за звонок",
                "agreements_time": "16.01.2025 12:00",
                "lead_destination": "Продажи",
                "status": "warm",
            },
        },
        "callList": {"name": "Январь"},
    }


# =============================================================================
# Name / Phone
# =============================================================================


class TestLeadName:
    """Tests for the NAME transform."""

    def test_strips_whitespace(self):
        assert lead_name(" Ann ", {}) == "Ann"

    def test_none_stays_none(self):
        assert lead_name(None, {}) is None

    def test_blank_becomes_empty(self):
        """Blank names become "" and are dropped by the engine."""
        assert lead_name("   ", {}) == ""


class TestLeadPhone:
    """Tests for the PHONE transform."""

    def test_builds_multifield_entry(self):
        assert lead_phone("+7 900 123-45-67", {}) == [
            {"VALUE": "79001234567", "VALUE_TYPE": "WORK"}
        ]

    @pytest.mark.parametrize("value", [None, "", "no digits", "+-()"])
    def test_no_digits_returns_none(self, value):
        assert lead_phone(value, {}) is None

    def test_numeric_input(self):
        assert lead_phone(79001234567, {}) == [
            {"VALUE": "79001234567", "VALUE_TYPE": "WORK"}
        ]


# =============================================================================
# Formatting helpers
# =============================================================================


class TestFormatting:
    """Tests for the summary formatting helpers."""

    @pytest.mark.parametrize(
        "duration_ms,expected",
        [
            (0, "0:00"),
            (999, "0:00"),
            (5000, "0:05"),
            (65000, "1:05"),
            (125000, "2:05"),
            (3600000, "60:00"),
            ("65000", "1:05"),
            (None, PLACEHOLDER),
            ("abc", PLACEHOLDER),
            (-1000, PLACEHOLDER),
            (True, PLACEHOLDER),
            (float("inf"), PLACEHOLDER),
            (float("nan"), PLACEHOLDER),
        ],
    )
    def test_format_duration(self, duration_ms, expected):
        assert format_duration(duration_ms) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2025-01-15T09:05:00Z", "15.01.2025 12:05"),
            ("2025-01-15T09:05:00+00:00", "15.01.2025 12:05"),
            ("2025-01-15T09:05:00", "15.01.2025 12:05"),
            ("2025-12-31T22:30:00Z", "01.01.2026 01:30"),
            ("2025-01-15T12:05:00+03:00", "15.01.2025 12:05"),
            (1736931900000, "15.01.2025 12:05"),
            ("1736931900000", "15.01.2025 12:05"),
            (None, PLACEHOLDER),
            ("", PLACEHOLDER),
            ("not a date", PLACEHOLDER),
            (10**20, PLACEHOLDER),
            ("1" + "0" * 20, PLACEHOLDER),
            (float("inf"), PLACEHOLDER),
            ("9999-12-31T23:59:00Z", PLACEHOLDER),
        ],
    )
    def test_format_timestamp(self, value, expected):
        """Timestamps are shown at UTC+3 as DD.MM.YYYY HH:MM."""
        assert format_timestamp(value) == expected

    def test_parse_timestamp_is_aware(self):
        parsed = parse_timestamp("2025-01-15T09:05:00")
        assert parsed is not None
        assert parsed.tzinfo is not None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("+7 (900) 123-45-67", "+79001234567"),
            ("89001234567", "+89001234567"),
            (None, PLACEHOLDER),
            ("n/a", PLACEHOLDER),
        ],
    )
    def test_format_phone(self, value, expected):
        assert format_phone(value) == expected

    def test_digits_only(self):
        assert digits_only("a1b2c3") == "123"
        assert digits_only(None) == ""

    @pytest.mark.parametrize(
        "values,expected",
        [
            (["a", "b"], "a, b"),
            (["a", "", None, " b "], "a, b"),
            ([], PLACEHOLDER),
            (None, PLACEHOLDER),
            ("not a list", PLACEHOLDER),
        ],
    )
    def test_format_list(self, values, expected):
        assert format_list(values) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("outgoing", "Исходящий"),
            ("incoming", "Входящий"),
            ("inbound", "Входящий"),
            (None, PLACEHOLDER),
            ("", PLACEHOLDER),
        ],
    )
    def test_format_call_type(self, value, expected):
        assert format_call_type(value) == expected


# =============================================================================
# Comments summary
# =============================================================================


class TestLeadComments:
    """Tests for the COMMENTS summary transform."""

    def test_full_document_summary(self, full_document):
        """Every section is rendered from its document field."""
        summary = lead_comments(None, full_document)

        assert "Договоренности: Перезвонить завтра" in summary
        assert "Факты о клиенте: Интересуется тарифом" in summary
        assert "SMS текст: Спасибо за звонок" in summary
        assert "Время договоренности: 16.01.2025 12:00" in summary
        assert "Направление лида: Продажи" in summary
        assert "Статус: warm" in summary
        assert "Телефон: +79001234567" in summary
        assert "Длительность звонка: 2:05" in summary
        assert "Звонок начат: 15.01.2025 12:05" in summary
        assert "Звонок завершен: 15.01.2025 12:07" in summary
        assert "Тип звонка: Исходящий" in summary
        assert "Статус звонка: completed" in summary
        assert "Причина завершения: client" in summary
        assert "Регион: Москва" in summary
        assert "Оператор: МТС" in summary
        assert "Часовой пояс: UTC+3" in summary
        assert "Колл-лист: Январь" in summary
        assert "Теги: hot, callback" in summary
        assert "Сайт: example.ru" in summary
        assert "Страница: /pricing" in summary
        assert "IP: 203.0.113.7" in summary
        assert PLACEHOLDER not in summary

    def test_absent_fields_use_placeholder(self):
        """Missing sections render the placeholder rather than disappearing."""
        summary = lead_comments(None, {"contact": {"phone": "1"}, "call": {"status": "x"}})

        assert f"Договоренности: {PLACEHOLDER}" in summary
        assert f"Длительность звонка: {PLACEHOLDER}" in summary
        assert f"Звонок начат: {PLACEHOLDER}" in summary
        assert f"Регион: {PLACEHOLDER}" in summary
        assert f"Теги: {PLACEHOLDER}" in summary
        assert f"IP: {PLACEHOLDER}" in summary
        assert "Статус звонка: x" in summary
        assert "Телефон: +1" in summary

    def test_line_count_is_fixed(self, full_document):
        """The summary shape does not depend on which fields are present."""
        full = lead_comments(None, full_document)
        empty = lead_comments(None, {})
        assert len(full.splitlines()) == len(empty.splitlines())

    def test_sections_separated_by_blank_line(self, full_document):
        summary = lead_comments(None, full_document)
        assert summary.count("\n\n") == 2

    def test_handles_non_mapping_sections(self):
        """Unexpected types in the document do not raise."""
        summary = lead_comments(None, {"call": "broken", "contact": ["x"]})
        assert f"Длительность звонка: {PLACEHOLDER}" in summary

    def test_out_of_range_values_use_placeholder(self):
        """Overflowing numbers degrade to the placeholder instead of raising."""
        document = {
            "contact": {"phone": "+7 900"},
            "call": {"startedAt": 10**20, "endedAt": float("inf"), "duration": float("inf")},
        }

        summary = lead_comments(None, document)

        assert f"Звонок начат: {PLACEHOLDER}" in summary
        assert f"Звонок завершен: {PLACEHOLDER}" in summary
        assert f"Длительность звонка: {PLACEHOLDER}" in summary
        assert "Телефон: +7900" in summary

    def test_does_not_mutate_document(self, full_document):
        original = copy.deepcopy(full_document)
        lead_comments(None, full_document)
        assert full_document == original

    def test_deterministic(self, full_document):
        assert lead_comments(None, full_document) == lead_comments(None, full_document)
