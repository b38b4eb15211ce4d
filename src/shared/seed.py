"""Seeded random sources for simulated latency and synthetic catalogues."""

from __future__ import annotations

import logging
import random

log = logging.getLogger(__name__)


def make_rng(seed: int | None = None) -> random.Random:
    """Return a dedicated ``random.Random`` instance.

    With ``seed=None`` the generator is seeded from OS entropy; the global
    ``random`` module is never touched so catalogue loads stay independent
    of other code using it.
    """
    rng = random.Random(seed)
    if seed is not None:
        log.debug("Random seed initialised: %d", seed)
    return rng
