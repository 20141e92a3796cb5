"""Range mapper tests: policies, rejection boundary, retry driver and validation."""

from collections import Counter

import pytest

from qrng_mapper import (
    BiasInfo,
    InvalidArgument,
    RejectionInfo,
    analyze_bias,
    map_one,
    map_one_simple,
    map_with_retry,
)


def test_basic_range_mapping_stays_in_bounds():
    result = map_one(32768, 1, 6)
    assert 1 <= result.value <= 6
    assert result.rejected is False
    assert result.method == "rejection_sampling"


def test_single_value_range_ignores_policy():
    for sample in (0, 12345, 65535):
        for flag in (True, False):
            result = map_one(sample, 5, 5, flag)
            assert result.value == 5
            assert result.rejected is False
            assert result.method == "single_value"
            assert result.bias_info is None


def test_perfectly_divisible_range_uses_plain_modulo():
    result = map_one(12345, 0, 255)
    assert result.rejected is False
    assert result.method == "modulo_mapping"
    assert result.bias_info is None
    assert result.value == 12345 % 256


def test_rejection_boundary_for_dice():
    assert analyze_bias(1, 6).bias_threshold == 65532

    rejected = map_one(65532, 1, 6, True)
    assert rejected.rejected is True
    assert rejected.value is None
    assert rejected.accepted is False
    assert rejected.method == "rejection_sampling"
    assert rejected.bias_info == RejectionInfo(threshold=65532, would_have_been=1 + 65532 % 6)

    accepted = map_one(65531, 1, 6, True)
    assert accepted.rejected is False
    assert accepted.value == 1 + 65531 % 6
    assert accepted.bias_info == BiasInfo(
        remainder=4, quotient=10922, bias_threshold=65532, perfectly_divisible=False
    )


def test_disabled_rejection_accepts_biased_sample():
    result = map_one(65533, 1, 6, False)
    assert result.rejected is False
    assert result.method == "modulo_mapping"
    assert result.value == 1 + 65533 % 6
    assert isinstance(result.bias_info, BiasInfo)


def test_map_one_simple_returns_plain_value():
    assert map_one_simple(32768, 1, 6) == 1 + 32768 % 6
    assert map_one_simple(65535, 1, 6) == 1 + 65535 % 6


def test_negative_and_large_ranges():
    assert -10 <= map_one(32768, -10, 10).value <= 10
    assert 1 <= map_one(32768, 1, 1000).value <= 1000
    assert map_one(32768, 0, 1).value in (0, 1)


@pytest.mark.parametrize(
    "lo,hi",
    [(1, 6), (0, 1), (1, 20), (0, 99), (-7, 5), (1, 1000), (0, 65534)],
)
def test_rejection_sampling_is_exactly_uniform(lo, hi):
    analysis = analyze_bias(lo, hi)
    counts = Counter()
    for sample in range(65536):
        result = map_one(sample, lo, hi, True)
        if not result.rejected:
            counts[result.value] += 1

    assert set(counts) == set(range(lo, hi + 1))
    assert set(counts.values()) == {analysis.quotient}
    assert sum(counts.values()) == analysis.bias_threshold


def test_modulo_mapping_matches_expected_frequencies():
    analysis = analyze_bias(1, 6)
    counts = Counter(map_one_simple(sample, 1, 6) for sample in range(65536))
    assert dict(counts) == dict(analysis.expected_frequencies)


def test_ranges_wider_than_sample_space_reject_everything():
    assert map_one(0, 0, 70000, True).rejected is True
    assert map_one(0, 0, 70000, False).value == 0


def test_retry_succeeds_on_first_sample():
    result = map_with_retry([1000], 1, 6)
    assert result.value == 1 + 1000 % 6
    assert result.attempts_used == 1
    assert result.rejected_values == ()
    assert result.fallback_used is False
    assert result.efficiency == "100.00%"


def test_retry_after_one_rejection():
    result = map_with_retry([65533, 1000], 1, 6)
    assert result.attempts_used == 2
    assert result.rejected_values == (65533,)
    assert result.value == 1 + 1000 % 6
    assert result.fallback_used is False
    assert result.efficiency == "50.00%"


def test_retry_efficiency_formats_two_decimals():
    result = map_with_retry([65532, 65533, 65534, 7], 1, 6)
    assert result.attempts_used == 4
    assert result.efficiency == "25.00%"

    result = map_with_retry([65532, 65533, 7], 1, 6)
    assert result.efficiency == "33.33%"


def test_retry_exhaustion_falls_back_to_last_sample():
    result = map_with_retry([65532, 65533], 1, 6)
    assert result.fallback_used is True
    assert result.efficiency == "0%"
    assert result.attempts_used == 2
    assert result.rejected_values == (65532,)
    assert result.value == 1 + 65533 % 6


def test_retry_exhaustion_logs_warning(caplog):
    with caplog.at_level("WARNING", logger="qrng_mapper.mapper"):
        map_with_retry([65535], 1, 6)
    assert "modulo fallback" in caplog.text


def test_retry_only_advances_iterator_to_accepted_sample():
    stream = iter([65534, 10, 20, 30])
    first = map_with_retry(stream, 1, 6)
    assert first.attempts_used == 2
    assert next(stream) == 20


def test_retry_result_serialises():
    payload = map_with_retry([65533, 1000], 1, 6).as_dict()
    assert payload["rejected_values"] == [65533]
    assert payload["fallback_used"] is False


def test_retry_rejects_empty_batch():
    with pytest.raises(InvalidArgument):
        map_with_retry([], 1, 6)


def test_retry_propagates_bound_errors():
    with pytest.raises(InvalidArgument):
        map_with_retry([1000], 6, 1)
    with pytest.raises(InvalidArgument):
        map_with_retry([1000], 1.5, 6)


@pytest.mark.parametrize(
    "args",
    [
        (-1, 1, 6),
        (65536, 1, 6),
        (100, 6, 1),
        (100.5, 1, 6),
        (True, 1, 6),
        ("7", 1, 6),
        (100, 1.0, 6),
        (100, 1, None),
    ],
)
def test_invalid_arguments_raise(args):
    with pytest.raises(InvalidArgument):
        map_one(*args)


def test_invalid_argument_is_value_error():
    assert issubclass(InvalidArgument, ValueError)


def test_mapping_result_is_immutable():
    result = map_one(1, 1, 6)
    with pytest.raises(AttributeError):
        result.value = 3
