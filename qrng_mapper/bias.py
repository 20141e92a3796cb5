"""Theoretical bias metrics for modulo-mapping uint16 samples onto a range."""

from .mapper import SAMPLE_SPACE, validate_bounds
from .models import BiasReport, ExpectedFrequencies


def expected_frequencies(min_value: int, max_value: int) -> ExpectedFrequencies:
    """Occurrences of each value when every one of the 65536 samples is modulo-mapped."""

    validate_bounds(min_value, max_value)
    width = max_value - min_value + 1
    quotient, remainder = divmod(SAMPLE_SPACE, width)
    return ExpectedFrequencies(int(min_value), int(max_value), quotient, remainder)


def analyze_bias(min_value: int, max_value: int) -> BiasReport:
    """Summarise how far plain modulo mapping onto ``[min_value, max_value]`` is from uniform.

    The first ``remainder`` values of the range (counting from ``min_value``)
    each receive one extra sample; ``rejection_rate`` is the share of samples
    rejection sampling discards to remove that excess.
    """

    validate_bounds(min_value, max_value)
    width = max_value - min_value + 1
    quotient, remainder = divmod(SAMPLE_SPACE, width)

    if remainder:
        rejection_rate = f"{remainder / SAMPLE_SPACE * 100:.4f}%"
    else:
        rejection_rate = "0%"

    return BiasReport(
        range=width,
        perfectly_divisible=remainder == 0,
        remainder=remainder,
        quotient=quotient,
        bias_threshold=quotient * width,
        biased_values=remainder,
        unbiased_values=width - remainder,
        base_frequency=quotient,
        max_frequency=quotient + (1 if remainder > 0 else 0),
        rejection_rate=rejection_rate,
        expected_frequencies=ExpectedFrequencies(int(min_value), int(max_value), quotient, remainder),
    )
