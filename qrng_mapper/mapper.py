"""Unbiased mapping of 16-bit samples onto arbitrary inclusive integer ranges."""

import logging
from numbers import Integral
from typing import Iterable

from .models import BiasInfo, MappingResult, RejectionInfo, RetryResult

logger = logging.getLogger(__name__)

SAMPLE_SPACE = 65536  # 2**16 distinct uint16 samples
MAX_SAMPLE = SAMPLE_SPACE - 1

SINGLE_VALUE = "single_value"
MODULO_MAPPING = "modulo_mapping"
REJECTION_SAMPLING = "rejection_sampling"


class InvalidArgument(ValueError):
    """Raised for malformed samples or bounds."""


def _is_integer(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def validate_bounds(min_value, max_value) -> None:
    if not _is_integer(min_value) or not _is_integer(max_value) or min_value > max_value:
        raise InvalidArgument(
            f"min and max must be integers with min <= max (got {min_value!r}, {max_value!r})"
        )


def validate_sample(raw_int) -> None:
    if not _is_integer(raw_int) or raw_int < 0 or raw_int > MAX_SAMPLE:
        raise InvalidArgument(
            f"sample must be an integer between 0 and {MAX_SAMPLE} (got {raw_int!r})"
        )


def map_one(
    raw_int: int,
    min_value: int,
    max_value: int,
    use_rejection_sampling: bool = True,
) -> MappingResult:
    """Map one uint16 sample onto ``[min_value, max_value]``.

    With rejection sampling enabled, samples at or above the bias threshold
    (``(65536 // width) * width``) are rejected so that every accepted sample
    lands in a bucket of the same size. With it disabled the plain modulo
    result is returned even when the width does not divide 65536.
    """

    validate_sample(raw_int)
    validate_bounds(min_value, max_value)

    raw_int = int(raw_int)
    min_value = int(min_value)
    max_value = int(max_value)

    if min_value == max_value:
        return MappingResult(value=min_value, rejected=False, method=SINGLE_VALUE)

    width = max_value - min_value + 1
    quotient, remainder = divmod(SAMPLE_SPACE, width)
    bias_threshold = quotient * width
    mapped = min_value + raw_int % width

    if remainder == 0:
        return MappingResult(value=mapped, rejected=False, method=MODULO_MAPPING)

    if use_rejection_sampling and raw_int >= bias_threshold:
        logger.debug(
            "Rejected sample %d for [%d, %d] (threshold %d)",
            raw_int,
            min_value,
            max_value,
            bias_threshold,
        )
        return MappingResult(
            value=None,
            rejected=True,
            method=REJECTION_SAMPLING,
            bias_info=RejectionInfo(threshold=bias_threshold, would_have_been=mapped),
        )

    return MappingResult(
        value=mapped,
        rejected=False,
        method=REJECTION_SAMPLING if use_rejection_sampling else MODULO_MAPPING,
        bias_info=BiasInfo(
            remainder=remainder,
            quotient=quotient,
            bias_threshold=bias_threshold,
            perfectly_divisible=False,
        ),
    )


def map_one_simple(raw_int: int, min_value: int, max_value: int) -> int:
    """Plain modulo mapping; biased unless the width divides 65536."""
    return map_one(raw_int, min_value, max_value, use_rejection_sampling=False).value


def map_with_retry(samples: Iterable[int], min_value: int, max_value: int) -> RetryResult:
    """Consume samples in order until one survives rejection sampling.

    Samples are pulled lazily, so an iterator is only advanced up to the
    accepted sample and can be handed to the next call. If the whole batch
    is rejected the last sample is mapped with plain modulo mapping instead
    of failing; ``fallback_used`` flags that case and the fallback sample is
    left out of ``rejected_values``. ``efficiency`` is the accepted share of
    the attempts made (always ``1 / attempts_used`` on success).
    """

    validate_bounds(min_value, max_value)

    rejected = []
    attempts = 0
    for raw_int in samples:
        attempts += 1
        result = map_one(raw_int, min_value, max_value, use_rejection_sampling=True)
        if not result.rejected:
            return RetryResult(
                value=result.value,
                attempts_used=attempts,
                rejected_values=tuple(rejected),
                fallback_used=False,
                efficiency=f"{1 / attempts * 100:.2f}%",
            )
        rejected.append(raw_int)

    if not attempts:
        raise InvalidArgument("at least one sample is required")

    fallback = map_one(rejected[-1], min_value, max_value, use_rejection_sampling=False)
    logger.warning(
        "All %d samples rejected for [%d, %d]; using biased modulo fallback",
        attempts,
        min_value,
        max_value,
    )
    return RetryResult(
        value=fallback.value,
        attempts_used=attempts,
        rejected_values=tuple(rejected[:-1]),
        fallback_used=True,
        efficiency="0%",
    )
