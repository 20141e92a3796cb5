"""Value objects returned by the range mapper and bias analyzer."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from numbers import Integral
from typing import Any, Dict, Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class RejectionInfo:
    threshold: int
    would_have_been: int


@dataclass(frozen=True)
class BiasInfo:
    remainder: int
    quotient: int
    bias_threshold: int
    perfectly_divisible: bool = False


@dataclass(frozen=True)
class MappingResult:
    """Outcome of mapping one sample; ``value`` is None when rejected."""

    value: Optional[int]
    rejected: bool
    method: str
    bias_info: Union[RejectionInfo, BiasInfo, None] = None

    @property
    def accepted(self) -> bool:
        return not self.rejected

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RetryResult:
    value: int
    attempts_used: int
    rejected_values: Tuple[int, ...]
    fallback_used: bool
    efficiency: str

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["rejected_values"] = list(self.rejected_values)
        return payload


class ExpectedFrequencies(Mapping):
    """Read-only ``value -> expected count`` view over [min, max] for 65536 trials.

    Counts are derived per key, so wide ranges cost nothing until iterated.
    """

    __slots__ = ("_min", "_max", "_quotient", "_remainder")

    def __init__(self, min_value: int, max_value: int, quotient: int, remainder: int):
        self._min = min_value
        self._max = max_value
        self._quotient = quotient
        self._remainder = remainder

    def __getitem__(self, key: int) -> int:
        if isinstance(key, bool) or not isinstance(key, Integral):
            raise KeyError(key)
        if key < self._min or key > self._max:
            raise KeyError(key)
        return self._quotient + (1 if key - self._min < self._remainder else 0)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self._min, self._max + 1))

    def __len__(self) -> int:
        return self._max - self._min + 1

    def total(self) -> int:
        """Sum of all counts without iterating every key."""
        return self._quotient * len(self) + self._remainder

    def __repr__(self) -> str:
        return (
            f"ExpectedFrequencies(min={self._min}, max={self._max}, "
            f"quotient={self._quotient}, remainder={self._remainder})"
        )


@dataclass(frozen=True)
class BiasReport:
    range: int
    perfectly_divisible: bool
    remainder: int
    quotient: int
    bias_threshold: int
    biased_values: int
    unbiased_values: int
    base_frequency: int
    max_frequency: int
    rejection_rate: str
    expected_frequencies: ExpectedFrequencies = field(hash=False)

    def as_dict(self) -> Dict[str, Any]:
        payload = {
            name: getattr(self, name)
            for name in self.__dataclass_fields__
            if name != "expected_frequencies"
        }
        payload["expected_frequencies"] = {
            str(value): count for value, count in self.expected_frequencies.items()
        }
        return payload
