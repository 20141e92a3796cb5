"""Public package surface for the unbiased uint16 range mapper."""

from .bias import analyze_bias, expected_frequencies
from .harness import HarnessConfig, measure_distribution_bias, run_comprehensive_suite
from .mapper import InvalidArgument, map_one, map_one_simple, map_with_retry
from .models import BiasInfo, BiasReport, MappingResult, RejectionInfo, RetryResult
from .samples import (
    LocalEntropySource,
    SampleSource,
    SeededSource,
    uint16_from_bytes,
    uint16_from_hex,
    uint16_from_uint8,
)

__all__ = [
    "BiasInfo",
    "BiasReport",
    "HarnessConfig",
    "InvalidArgument",
    "LocalEntropySource",
    "MappingResult",
    "RejectionInfo",
    "RetryResult",
    "SampleSource",
    "SeededSource",
    "analyze_bias",
    "expected_frequencies",
    "map_one",
    "map_one_simple",
    "map_with_retry",
    "measure_distribution_bias",
    "run_comprehensive_suite",
    "uint16_from_bytes",
    "uint16_from_hex",
    "uint16_from_uint8",
]
