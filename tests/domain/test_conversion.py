"""
🧪 test_conversion.py — unit-тести для рушія конвертації

Перевіряє:
- Три гілки півоту через EUR та тотожну конвертацію
- Валідацію суми і кодів валют
- Відсутні курси, порожню таблицю та округлення для відображення
"""

import math

import pytest

from fxwidget.domain.currency import RateTable, convert, effective_rate, validate_amount
from fxwidget.domain.currency.interfaces import quantize_display
from fxwidget.shared.errors import ConversionFailure, RatesUnavailable, ValidationFailure
from decimal import Decimal


def test_usd_to_gbp_through_eur(scenario_table):
    result = convert(10, "USD", "GBP", scenario_table)

    assert result.converted_amount == pytest.approx(7.7272727, rel=1e-6)
    assert result.effective_rate == pytest.approx(0.85 / 1.1)
    assert result.summary() == "10.00 USD = 7.73 GBP"
    assert result.rate_line() == "Exchange rate: 1 USD = 0.772727 GBP"


def test_eur_to_usd_uses_table_rate(scenario_table):
    result = convert(1, "EUR", "USD", scenario_table)

    assert result.effective_rate == 1.1
    assert result.summary() == "1.00 EUR = 1.10 USD"
    assert result.rate_line() == "Exchange rate: 1 EUR = 1.100000 USD"


def test_usd_to_eur_uses_inverse(scenario_table):
    result = convert(11, "USD", "EUR", scenario_table)

    assert result.effective_rate == pytest.approx(1 / 1.1)
    assert result.converted_amount == pytest.approx(10.0)
    assert result.summary() == "11.00 USD = 10.00 EUR"


def test_identity_works_with_empty_table():
    result = convert(5, "JPY", "JPY", RateTable.empty())

    assert result.converted_amount == 5
    assert result.effective_rate == 1.0
    assert result.is_identity
    assert result.summary() == "5.00 JPY = 5.00 JPY"


def test_codes_are_normalised(scenario_table):
    result = convert(2, " usd", "gbp ", scenario_table)
    assert result.request.source_code == "USD"
    assert result.request.target_code == "GBP"


def test_plain_mapping_is_accepted():
    result = convert(2, "EUR", "USD", {"USD": 1.5})
    assert result.converted_amount == pytest.approx(3.0)


@pytest.mark.parametrize("amount", [0, -1, float("nan"), float("inf"), "abc", None, True])
def test_invalid_amounts_rejected(amount, scenario_table):
    with pytest.raises(ValidationFailure) as info:
        convert(amount, "USD", "GBP", scenario_table)
    assert info.value.message == "Please enter a valid amount"
    assert info.value.reason == "Invalid amount"


def test_amount_ceiling(scenario_table):
    assert convert(1_000_000, "EUR", "USD", scenario_table).converted_amount == pytest.approx(1_100_000)
    with pytest.raises(ValidationFailure):
        convert(1_000_000.01, "EUR", "USD", scenario_table)


def test_validation_runs_before_rates_check():
    with pytest.raises(ValidationFailure):
        convert(0, "USD", "GBP", RateTable.empty())


def test_empty_code_rejected(scenario_table):
    with pytest.raises(ValidationFailure):
        convert(1, "", "USD", scenario_table)


def test_empty_table_is_rates_unavailable():
    with pytest.raises(RatesUnavailable) as info:
        convert(1, "USD", "GBP", RateTable.empty())
    assert info.value.message == "Loading exchange rates..."


def test_table_with_only_invalid_entries_is_conversion_failure():
    with pytest.raises(ConversionFailure) as info:
        convert(1, "EUR", "USD", {"USD": 0})
    assert info.value.missing_code == "USD"

    with pytest.raises(RatesUnavailable):
        convert(1, "EUR", "USD", {})


def test_missing_rate_is_conversion_failure(scenario_table):
    with pytest.raises(ConversionFailure) as info:
        convert(1, "USD", "JPY", scenario_table)
    assert info.value.missing_code == "JPY"
    assert info.value.message == "Unable to calculate conversion. Please try again."


def test_non_finite_result_never_escapes():
    table = RateTable.from_mapping({"USD": 1e-308, "GBP": 1e308})
    with pytest.raises(ConversionFailure):
        convert(1_000_000, "USD", "GBP", table)


@pytest.mark.parametrize("source,target", [("USD", "GBP"), ("GBP", "EUR"), ("EUR", "USD")])
def test_round_trip_rates_multiply_to_one(source, target, scenario_table):
    forward = effective_rate(source, target, scenario_table)
    backward = effective_rate(target, source, scenario_table)
    assert forward * backward == pytest.approx(1.0)


def test_invalid_rate_entries_are_dropped():
    table = RateTable.from_mapping({"USD": 1.1, "BAD": 0, "NEG": -2, "NAN": float("nan"), "TXT": "x"})
    assert list(table) == ["USD"]
    assert table.lookup("BAD") is None


def test_lookup_treats_eur_as_one():
    table = RateTable.from_mapping({"USD": 1.1})
    assert table.lookup("EUR") == 1.0
    assert table.lookup("JPY") is None
    assert "eur" in table


def test_display_rounding_follows_binary_value():
    assert quantize_display(0.125, Decimal("0.01")) == Decimal("0.13")
    assert quantize_display(2.675, Decimal("0.01")) == Decimal("2.67")


def test_validate_amount_returns_float():
    value = validate_amount("12.5")
    assert value == 12.5 and not math.isnan(value)
