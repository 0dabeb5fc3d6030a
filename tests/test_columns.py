import pytest

from signal_normalizer.columns import (
    profile_columns,
    resolve_by_keywords,
    resolve_by_statistics,
    resolve_columns,
    score_header,
)
from signal_normalizer.errors import ColumnDetectionError, ErrorKind
from signal_normalizer.rules import EXACT_MATCH_BONUS, FREQUENCY_KEYWORDS, POWER_KEYWORDS


def test_score_counts_substring_hits():
    # freq, frequency, mhz, hz
    assert score_header("Frequency (MHz)", FREQUENCY_KEYWORDS) == 4
    assert score_header("Frequency (MHz)", POWER_KEYWORDS) == 0


def test_exact_match_earns_bonus():
    assert score_header(" Power ", POWER_KEYWORDS) == 1 + EXACT_MATCH_BONUS
    assert score_header("power_supply_level", POWER_KEYWORDS) == 2


def test_keywords_frequency_and_power_headers():
    assert resolve_by_keywords(["Frequency (MHz)", "Power (dBm)"]) == (0, 1)


def test_keywords_shared_hint_column_does_not_take_both_roles():
    freq_index, power_index = resolve_by_keywords(["Signal_Power_MHz", "Level"])
    assert freq_index != power_index
    assert (freq_index, power_index) == (0, 1)


def test_conflict_tie_keeps_frequency_and_moves_power():
    headers = ["signal power (mhz)", "rssi level", "channel index"]
    assert resolve_by_keywords(headers) == (0, 1)


def test_conflict_power_wins_and_frequency_moves():
    headers = ["power level dbm (mhz)", "band index"]
    assert resolve_by_keywords(headers) == (1, 0)


def test_conflict_without_alternative_raises():
    with pytest.raises(ValueError):
        resolve_by_keywords(["signal mhz", "notes"])


def test_keywords_give_no_hint():
    assert resolve_by_keywords(["a", "b"]) is None
    assert resolve_by_keywords(["freq", "value"]) is None


def _headerless_rows():
    return [[f"{2400 + i * 5}", f"{-90 + i * 2.5}"] for i in range(21)]


def test_statistics_negative_column_is_power():
    assert resolve_by_statistics(_headerless_rows()) == (0, 1)
    swapped = [[p, f] for f, p in _headerless_rows()]
    assert resolve_by_statistics(swapped) == (1, 0)


def test_profile_columns_counts():
    rows = [["100", "-50", "x"], ["101", "-51", "y"], ["n/a", "3", "z"]]
    profiles = profile_columns(rows)
    assert [(p.numeric_count, p.negative_count) for p in profiles] == [(2, 0), (3, 2), (0, 0)]


def test_statistics_needs_two_numeric_columns():
    rows = [["abc", "-50"], ["def", "-51"], ["ghi", "-52"]]
    assert resolve_by_statistics(rows) is None
    assert resolve_by_statistics([]) is None


def test_resolve_columns_falls_back_to_statistics_with_partial_header():
    rows = [["100", "-50"], ["101", "-51"]]
    assert resolve_columns(["freq", "value"], rows, has_header=True) == (0, 1)


def test_resolve_columns_failure_carries_recovery_payload():
    rows = [[f"name{i}", f"city{i}"] for i in range(8)]
    with pytest.raises(ColumnDetectionError) as excinfo:
        resolve_columns(["name", "city"], rows, has_header=True)

    err = excinfo.value
    assert err.kind is ErrorKind.COLUMN_DETECTION
    assert err.headers == ["name", "city"]
    assert err.sample_data == rows[:5]
    detail = err.to_detail()
    assert detail["kind"] == "column_detection"
    assert detail["sampleData"] == rows[:5]


def test_resolve_columns_unresolved_conflict_is_detection_error():
    with pytest.raises(ColumnDetectionError):
        resolve_columns(["signal mhz", "notes"], [["100", "x"]], has_header=True)
