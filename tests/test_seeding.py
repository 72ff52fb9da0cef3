import numpy as np
import pytest

from envcore import error
from envcore.utils import seeding


def test_same_seed_same_stream():
    rng_1, seed_1 = seeding.np_random(42)
    rng_2, seed_2 = seeding.np_random(42)
    assert seed_1 == seed_2 == 42
    draws_1 = [seeding.next_uint(rng_1) for _ in range(10_000)]
    draws_2 = [seeding.next_uint(rng_2) for _ in range(10_000)]
    assert draws_1 == draws_2


def test_different_seeds_different_streams():
    rng_1, _ = seeding.np_random(1)
    rng_2, _ = seeding.np_random(2)
    assert [seeding.next_uint(rng_1) for _ in range(10)] != [seeding.next_uint(rng_2) for _ in range(10)]


def test_entropy_seed_is_returned_and_replayable():
    rng, seed = seeding.np_random()
    assert isinstance(seed, int) and seed >= 0
    replay, _ = seeding.np_random(seed)
    assert rng.random() == replay.random()


@pytest.mark.parametrize("seed", [-1, 1.5, "42", True, [1]])
def test_invalid_seed(seed):
    with pytest.raises(error.InvalidSeed):
        seeding.np_random(seed)


def test_invalid_seed_is_a_value_error():
    with pytest.raises(ValueError):
        seeding.np_random(-3)


def test_numpy_integer_seed():
    rng_1, seed = seeding.np_random(np.int64(5))
    rng_2, _ = seeding.np_random(5)
    assert seed == 5
    assert rng_1.random() == rng_2.random()


def test_next_float_in_unit_interval():
    rng, _ = seeding.np_random(0)
    values = [seeding.next_float(rng) for _ in range(1000)]
    assert all(isinstance(v, float) and 0.0 <= v < 1.0 for v in values)


def test_next_in_range():
    rng, _ = seeding.np_random(0)
    ints = [seeding.next_in_range(rng, 3, 7) for _ in range(1000)]
    assert all(isinstance(v, int) and 3 <= v < 7 for v in ints)
    assert set(ints) == {3, 4, 5, 6}

    floats = [seeding.next_in_range(rng, -1.0, 1.0) for _ in range(1000)]
    assert all(isinstance(v, float) and -1.0 <= v < 1.0 for v in floats)


def test_spawn_child_is_deterministic():
    parent_1, _ = seeding.np_random(3)
    parent_2, _ = seeding.np_random(3)
    children_1 = [seeding.spawn_child(parent_1) for _ in range(2)]
    children_2 = [seeding.spawn_child(parent_2) for _ in range(2)]
    for child_1, child_2 in zip(children_1, children_2):
        assert child_1.integers(0, 2**32, size=16).tolist() == child_2.integers(0, 2**32, size=16).tolist()


def test_spawn_child_streams_are_distinct():
    parent, _ = seeding.np_random(3)
    reference, _ = seeding.np_random(3)
    child_a = seeding.spawn_child(parent)
    child_b = seeding.spawn_child(parent)

    draws_a = child_a.integers(0, 2**32, size=16).tolist()
    draws_b = child_b.integers(0, 2**32, size=16).tolist()
    assert draws_a != draws_b
    # spawning does not advance the parent
    assert parent.integers(0, 2**32, size=16).tolist() == reference.integers(0, 2**32, size=16).tolist()
    assert draws_a != reference.integers(0, 2**32, size=16).tolist()


def test_spawn_children():
    rng, _ = seeding.np_random(0)
    assert seeding.spawn_children(rng, 0) == []
    children = seeding.spawn_children(rng, 3)
    assert len(children) == 3
    assert all(isinstance(child, seeding.RNG) for child in children)


def test_derive_seeds():
    seeds = seeding.derive_seeds(7, 4)
    assert seeds == seeding.derive_seeds(7, 4)
    assert len(set(seeds)) == 4
    assert all(0 <= s < seeding.UINT64_BOUND for s in seeds)
    # each seed depends only on the master seed and its position
    assert seeding.derive_seeds(7, 2) == seeds[:2]
    assert seeding.derive_seeds(8, 4) != seeds
