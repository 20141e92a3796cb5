# PCG32 generator used as a reproducible stand-in for quantum uint16 batches
# Output function is XSH-RR over a 64-bit LCG state
from dataclasses import dataclass
from typing import List

_MASK64 = (1 << 64) - 1
_MULTIPLIER = 6364136223846793005

@dataclass
class PCG32:
    state: int
    inc: int = 1442695040888963407  # default stream

    @classmethod
    def seeded(cls, seed: int, stream: int = 54) -> "PCG32":
        # canonical pcg32_srandom: advance once, mix in the seed, advance again
        rng = cls(state=0, inc=((stream << 1) | 1) & _MASK64)
        rng.next_u32()
        rng.state = (rng.state + seed) & _MASK64
        rng.next_u32()
        return rng

    def next_u32(self) -> int:
        oldstate = self.state & _MASK64
        self.state = (oldstate * _MULTIPLIER + (self.inc | 1)) & _MASK64
        xorshifted = (((oldstate >> 18) ^ oldstate) >> 27) & 0xFFFFFFFF
        rot = (oldstate >> 59) & 31
        return (xorshifted >> rot) | ((xorshifted << ((-rot) & 31)) & 0xFFFFFFFF)

    def next_u16(self) -> int:
        # high half carries the better-mixed bits
        return self.next_u32() >> 16

    def uint16_batch(self, count: int) -> List[int]:
        return [self.next_u16() for _ in range(count)]
