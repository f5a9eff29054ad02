"""
Alea pseudo-random number generator.

Johannes Baagøe's Alea algorithm: small, fast, and seedable from arbitrary
strings, which lets a terrain seed be a short human-readable token. Each
generation call owns its own instance.
"""

_MASH_SEED = 0xEFC8249D
_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """Alea generator producing floats in [0, 1)."""

    def __init__(self, seed):
        """Initialize with a seed string, number, or iterable of either."""
        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]
        self.seed = seed

        mash_n = _MASH_SEED

        def mash(data):
            nonlocal mash_n
            for char in str(data):
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * _TWO_POW_32
            return _uint32(mash_n) * _TWO_POW_NEG_32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 -= mash(part)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(part)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(part)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + (high - low) * self.random()
