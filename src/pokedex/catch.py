"""Catch probability for the ``catch`` command.

The chance of catching a Pokemon falls linearly with its base experience,
from :data:`MAX_CATCH_RATE` for a Pokemon worth no experience down to
:data:`MIN_CATCH_RATE` at :data:`MAX_BASE_EXPERIENCE` (roughly Blissey).
"""

from __future__ import annotations

import random
from typing import Optional

MAX_BASE_EXPERIENCE = 600.0
MIN_CATCH_RATE = 0.1
MAX_CATCH_RATE = 0.9


def catch_rate(base_experience: Optional[int]) -> float:
    """Return the probability in ``[MIN_CATCH_RATE, MAX_CATCH_RATE]`` of a successful catch."""
    exp_ratio = (base_experience or 0) / MAX_BASE_EXPERIENCE
    rate = MAX_CATCH_RATE - exp_ratio * (MAX_CATCH_RATE - MIN_CATCH_RATE)
    return min(MAX_CATCH_RATE, max(MIN_CATCH_RATE, rate))


def attempt_catch(base_experience: Optional[int], rng: Optional[random.Random] = None) -> bool:
    """Roll once against :func:`catch_rate`.

    Args:
        base_experience: The Pokemon's base experience (``None`` counts as 0).
        rng: Random source; the module-level generator when omitted.
    """
    roll = (rng or random).random()
    return roll < catch_rate(base_experience)
