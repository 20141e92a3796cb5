"""Suppliers of uint16 sample batches and decoders for upstream QRNG payloads.

The quantum RNG service answers with one of four payload types: ``uint8``,
``uint16``, ``hex8`` and ``hex16``. The mapper only consumes uint16 samples,
so the helpers here normalise the other shapes into that form.
"""

from __future__ import annotations

import os
import string
from typing import Iterable, List, Protocol, Sequence, runtime_checkable

from .mapper import InvalidArgument, _is_integer, validate_sample
from .prng import PCG32

MAX_BATCH = 1024  # upstream API accepts 1..1024 values per request
_HEX_DIGITS = frozenset(string.hexdigits)


def _check_count(count: int) -> None:
    if not _is_integer(count) or count < 1 or count > MAX_BATCH:
        raise InvalidArgument(f"count must be an integer between 1 and {MAX_BATCH} (got {count!r})")


@runtime_checkable
class SampleSource(Protocol):
    """Anything that can hand out a batch of uint16 samples."""

    def uint16(self, count: int) -> List[int]:
        ...


class SeededSource:
    """Deterministic source; the same seed always yields the same batches."""

    def __init__(self, seed: int = 0):
        self.seed = seed
        self._rng = PCG32.seeded(seed)

    def uint16(self, count: int) -> List[int]:
        _check_count(count)
        return self._rng.uint16_batch(int(count))

    def stream(self, count: int) -> List[int]:
        """Like :meth:`uint16` but without the per-request batch cap."""
        return self._rng.uint16_batch(max(0, count))


class LocalEntropySource:
    """OS entropy (``os.urandom``); not a quantum source but unbiased per sample."""

    def uint16(self, count: int) -> List[int]:
        _check_count(count)
        return uint16_from_bytes(os.urandom(2 * int(count)))

    def stream(self, count: int) -> List[int]:
        if count <= 0:
            return []
        return uint16_from_bytes(os.urandom(2 * count))


def validate_samples(values: Iterable[int]) -> List[int]:
    samples = list(values)
    for value in samples:
        validate_sample(value)
    return samples


def uint16_from_bytes(data: bytes) -> List[int]:
    """Split a byte string into big-endian 16-bit samples."""

    if len(data) % 2:
        raise InvalidArgument(f"byte payload length must be even (got {len(data)})")
    return [int.from_bytes(data[i:i + 2], "big") for i in range(0, len(data), 2)]


def uint16_from_uint8(values: Sequence[int]) -> List[int]:
    """Pair ``uint8`` values (high byte first) into 16-bit samples."""

    if len(values) % 2:
        raise InvalidArgument(f"uint8 payload must hold an even number of values (got {len(values)})")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise InvalidArgument(f"uint8 value out of range: {value!r}")
    return [(values[i] << 8) | values[i + 1] for i in range(0, len(values), 2)]


def uint16_from_hex(blocks: Iterable[str]) -> List[int]:
    """Decode ``hex16``/``hex8`` blocks; every four hex digits form one sample."""

    samples: List[int] = []
    for block in blocks:
        if not isinstance(block, str):
            raise InvalidArgument(f"hex block must be a string (got {block!r})")
        text = block.strip()
        if not text or len(text) % 4:
            raise InvalidArgument(f"hex block length must be a positive multiple of 4: {block!r}")
        if not set(text) <= _HEX_DIGITS:
            raise InvalidArgument(f"hex block is not valid hexadecimal: {block!r}")
        samples.extend(int(text[i:i + 4], 16) for i in range(0, len(text), 4))
    return samples
