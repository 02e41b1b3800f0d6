"""Dice rolling utilities for Black Echo."""

import random

from config import DIE_SIDES


def roll_die(sides: int = DIE_SIDES, rng: random.Random | None = None) -> int:
    """Roll a single die.

    Args:
        sides: Number of faces; results are uniform in 1..sides.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        The rolled value.

    Raises:
        ValueError: If the die has fewer than one face.
    """
    if sides < 1:
        raise ValueError(f"A die needs at least one side, got {sides}")
    rng = rng or random.Random()
    return rng.randint(1, sides)
