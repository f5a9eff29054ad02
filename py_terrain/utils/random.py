"""
Seed handling for terrain generation.

Every generation call builds its own Alea PRNG from a seed string. There is
no process-wide generator: a call made without a seed draws a fresh one, so
two unseeded calls produce different fields while a recorded seed always
reproduces its field.
"""

import uuid
from typing import Optional

from ..core.alea_prng import AleaPRNG


def make_seed() -> str:
    """Return a fresh random seed string."""
    return str(uuid.uuid4())[:8]


def get_prng(seed: Optional[str] = None) -> AleaPRNG:
    """
    Build a new Alea PRNG for a single generation call.

    Args:
        seed: Seed string to use; a fresh one is drawn when omitted

    Returns:
        AleaPRNG instance owned by the caller
    """
    return AleaPRNG(seed if seed is not None else make_seed())
