"""Set of random number generator functions: seeding, generator, substreams."""
from __future__ import annotations

from typing import Any

import numpy as np

from envcore import error

RNG = RandomNumberGenerator = np.random.Generator

UINT64_BOUND = 2**64


def np_random(seed: int | None = None) -> tuple[np.random.Generator, int]:
    """Returns a NumPy random number generator (RNG) along with the seed value from the inputted seed.

    If ``seed`` is ``None`` then a **random** seed will be generated as the RNG's initial seed.
    This randomly selected seed is returned as the second value of the tuple.

    .. py:currentmodule:: envcore.Env

    This function is called in :meth:`reset` to reset an environment's initial RNG.

    The stream for a given seed is PCG64 driven by ``np.random.SeedSequence(seed)``. Changing this
    derivation changes every seeded experiment and must be treated as a breaking change.

    Args:
        seed: The seed used to create the generator

    Returns:
        A NumPy-based Random Number Generator and generator seed

    Raises:
        InvalidSeed: Seed must be a non-negative integer
    """
    if seed is not None:
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise error.InvalidSeed(
                f"Seed must be a python integer, actual type: {type(seed)}"
            )
        if seed < 0:
            raise error.InvalidSeed(
                f"Seed must be greater or equal to zero, actual value: {seed}"
            )
        seed = int(seed)

    seed_seq = np.random.SeedSequence(seed)
    np_seed = seed_seq.entropy
    rng = RandomNumberGenerator(np.random.PCG64(seed_seq))
    return rng, np_seed


def next_uint(rng: np.random.Generator) -> int:
    """Draws an unsigned integer uniformly from ``[0, 2**64)``."""
    return int(rng.integers(0, UINT64_BOUND, dtype=np.uint64))


def next_float(rng: np.random.Generator) -> float:
    """Draws a float uniformly from ``[0, 1)``."""
    return float(rng.random())


def next_in_range(rng: np.random.Generator, low: Any, high: Any) -> int | float:
    """Draws a value uniformly from ``[low, high)``.

    The draw is an integer when both bounds are integers and a float otherwise.
    """
    integral = (int, np.integer)
    if (
        isinstance(low, integral)
        and isinstance(high, integral)
        and not isinstance(low, bool)
        and not isinstance(high, bool)
    ):
        return int(rng.integers(low, high))
    return float(rng.uniform(low, high))


def spawn_child(rng: np.random.Generator) -> np.random.Generator:
    """Derives an independent substream from ``rng``.

    Children are spawned from the generator's ``SeedSequence``: spawning twice from equal parents
    yields the same two children in the same order, each distinct from the other and from the
    parent's own stream. The parent's draw position is left untouched.
    """
    return rng.spawn(1)[0]


def spawn_children(rng: np.random.Generator, n: int) -> list[np.random.Generator]:
    """Derives ``n`` independent substreams from ``rng``, see :func:`spawn_child`."""
    if n == 0:
        return []
    return rng.spawn(n)


def derive_seeds(seed: int | None, n: int) -> list[int]:
    """Derives ``n`` environment seeds from a single master seed.

    Intended for drivers that build several independent environments, e.g.
    ``[env.reset(seed=s) for env, s in zip(envs, derive_seeds(7, len(envs)))]``.

    Args:
        seed: The master seed, ``None`` for an entropy-seeded master
        n: The number of seeds to derive

    Returns:
        A list of ``n`` seeds, each a pure function of ``seed`` and its position
    """
    rng, _ = np_random(seed)
    return [next_uint(spawn_child(rng)) for _ in range(n)]
