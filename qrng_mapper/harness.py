"""Empirical bias harness comparing modulo mapping with rejection sampling."""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from .bias import analyze_bias
from .mapper import SAMPLE_SPACE, InvalidArgument, map_one_simple, map_with_retry, validate_bounds
from .samples import LocalEntropySource, SeededSource, validate_samples

logger = logging.getLogger(__name__)

SUITE_CASES = (
    ("Dice Roll (1-6)", 1, 6, 10000),
    ("Coin Flip (0-1)", 0, 1, 10000),
    ("D20 Roll (1-20)", 1, 20, 20000),
    ("Percent (0-99)", 0, 99, 50000),
    ("Perfect Division (0-255)", 0, 255, 10000),
)


@dataclass
class HarnessConfig:
    """Configuration for one distribution measurement."""

    min_value: int = 1
    max_value: int = 6
    sample_size: int = 10000
    use_rejection_sampling: bool = False
    seed: int = 42
    use_local_entropy: bool = False


def draw_samples(cfg: HarnessConfig, count: int) -> List[int]:
    if cfg.use_local_entropy:
        return LocalEntropySource().stream(count)
    return SeededSource(cfg.seed).stream(count)


def coefficient_of_variation(frequencies: Sequence[float]) -> float:
    if not frequencies:
        return 0.0
    mean = sum(frequencies) / len(frequencies)
    if mean == 0:
        return 0.0
    variance = sum((freq - mean) ** 2 for freq in frequencies) / len(frequencies)
    return math.sqrt(variance) / mean


def assess_bias_level(max_deviation: float, expected_frequency: float) -> str:
    relative = max_deviation / expected_frequency

    if relative < 0.01:
        return "Excellent (< 1%)"
    if relative < 0.05:
        return "Good (< 5%)"
    if relative < 0.1:
        return "Fair (< 10%)"
    if relative < 0.2:
        return "Poor (< 20%)"
    return "Very Poor (>= 20%)"


def assess_distribution_quality(cv: float, spread: float, sample_size: int, width: int = 6) -> str:
    # spread of a fair multinomial grows roughly with sqrt(n / k)
    expected_spread = math.sqrt(sample_size / width)
    normalized_spread = spread / expected_spread if expected_spread else float("inf")

    if cv < 0.02 and normalized_spread < 1.5:
        return "Excellent"
    if cv < 0.05 and normalized_spread < 2.0:
        return "Good"
    if cv < 0.1 and normalized_spread < 3.0:
        return "Fair"
    return "Poor"


def measure_distribution_bias(
    cfg: HarnessConfig, samples: Optional[Sequence[int]] = None
) -> Dict[str, Any]:
    """Map a batch of samples onto the configured range and score the result.

    Twice ``sample_size`` samples are drawn when none are supplied so that
    rejection sampling still has headroom to produce ``sample_size`` values.
    """

    validate_bounds(cfg.min_value, cfg.max_value)
    # a per-value frequency table is only meaningful while every value can be hit
    if cfg.max_value - cfg.min_value + 1 > SAMPLE_SPACE:
        raise InvalidArgument(
            f"range width must not exceed {SAMPLE_SPACE} values for a distribution measurement "
            f"(got [{cfg.min_value}, {cfg.max_value}])"
        )
    if cfg.sample_size < 1:
        raise InvalidArgument(f"sample_size must be positive (got {cfg.sample_size})")

    if samples is None:
        pool = draw_samples(cfg, cfg.sample_size * 2)
    else:
        pool = validate_samples(samples)
    if not pool:
        raise InvalidArgument("at least one sample is required")

    lo, hi = cfg.min_value, cfg.max_value
    width = hi - lo + 1
    analysis = analyze_bias(lo, hi)
    frequencies = {value: 0 for value in range(lo, hi + 1)}

    actual_samples = 0
    consumed = 0
    rejected_count = 0
    fallbacks = 0
    stream = iter(pool)
    while actual_samples < cfg.sample_size and consumed < len(pool):
        if cfg.use_rejection_sampling:
            result = map_with_retry(stream, lo, hi)
            frequencies[result.value] += 1
            rejected_count += len(result.rejected_values)
            consumed += result.attempts_used
            fallbacks += int(result.fallback_used)
        else:
            frequencies[map_one_simple(next(stream), lo, hi)] += 1
            consumed += 1
        actual_samples += 1

    uniform_expected = actual_samples / width
    chi_squared = 0.0
    results = []
    for value in range(lo, hi + 1):
        freq = frequencies[value]
        if cfg.use_rejection_sampling:
            expected = uniform_expected
        else:
            # scale the per-65536 modulo counts down to the samples actually mapped
            expected = analysis.expected_frequencies[value] * actual_samples / SAMPLE_SPACE
        deviation = freq - expected
        if expected:
            chi_squared += deviation * deviation / expected
        results.append(
            {
                "value": value,
                "frequency": freq,
                "expected": round(expected),
                "deviation": round(deviation, 4),
                "percentage": round(freq / actual_samples * 100, 2),
            }
        )

    counts = list(frequencies.values())
    min_freq = min(counts)
    max_freq = max(counts)
    cv = coefficient_of_variation(counts)
    max_deviation = max(abs(row["deviation"]) for row in results)
    actual_rejection_rate = rejected_count / consumed * 100 if cfg.use_rejection_sampling else 0.0

    logger.info(
        "Mapped %d samples onto [%d, %d] via %s (chi2=%.4f, rejected=%d)",
        actual_samples,
        lo,
        hi,
        "rejection sampling" if cfg.use_rejection_sampling else "modulo mapping",
        chi_squared,
        rejected_count,
    )

    return {
        "config": asdict(cfg),
        "results": results,
        "statistics": {
            "actual_samples": actual_samples,
            "min_freq": min_freq,
            "max_freq": max_freq,
            "range_spread": max_freq - min_freq,
            "coefficient_of_variation": round(cv, 6),
            "chi_squared": round(chi_squared, 4),
            "max_deviation": round(max_deviation, 4),
            "bias_level": assess_bias_level(max_deviation, uniform_expected),
            "quality": assess_distribution_quality(cv, max_freq - min_freq, actual_samples, width),
            "actual_rejection_rate": round(actual_rejection_rate, 4),
            "rejected_count": rejected_count,
            "fallbacks": fallbacks,
            "samples_consumed": consumed,
        },
        "bias_analysis": analysis.as_dict(),
    }


def run_comprehensive_suite(seed: int = 42, use_local_entropy: bool = False) -> List[Dict[str, Any]]:
    """Measure every standard case under both mapping policies."""

    suite = []
    for name, lo, hi, size in SUITE_CASES:
        base = dict(
            min_value=lo,
            max_value=hi,
            sample_size=size,
            seed=seed,
            use_local_entropy=use_local_entropy,
        )
        suite.append(
            {
                "name": name,
                "modulo": measure_distribution_bias(HarnessConfig(use_rejection_sampling=False, **base)),
                "rejection": measure_distribution_bias(HarnessConfig(use_rejection_sampling=True, **base)),
            }
        )
    return suite


def format_frequency_table(report: Dict[str, Any]) -> str:
    lines = [
        "Value | Frequency | Expected | Deviation | % of Total",
        "------|-----------|----------|-----------|-----------",
    ]
    for row in report["results"]:
        lines.append(
            f"{row['value']:>5} | {row['frequency']:>9} | {row['expected']:>8} | "
            f"{row['deviation']:>9.1f} | {row['percentage']:>9.2f}%"
        )
    stats = report["statistics"]
    lines.append("")
    lines.append(
        f"chi-squared {stats['chi_squared']:.4f}, cv {stats['coefficient_of_variation']:.4f}, "
        f"bias {stats['bias_level']}, quality {stats['quality']}"
    )
    return "\n".join(lines)


def format_suite_summary(suite: List[Dict[str, Any]]) -> str:
    lines = [
        "Test Case                  | Method             | Max Dev | Bias Level         | Quality",
        "---------------------------|--------------------|---------|--------------------|----------",
    ]
    for entry in suite:
        for label, key in (("Modulo Mapping", "modulo"), ("Rejection Sampling", "rejection")):
            stats = entry[key]["statistics"]
            name = entry["name"] if key == "modulo" else ""
            lines.append(
                f"{name:<26} | {label:<18} | {stats['max_deviation']:>7.1f} | "
                f"{stats['bias_level']:<18} | {stats['quality']}"
            )
    return "\n".join(lines)
