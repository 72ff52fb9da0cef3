"""A set of functions for checking an environment implementation.

This file is originally adapted from the Gymnasium environment checker and covers the envcore contract:

- the observation and action spaces are :class:`envcore.Space` instances
- :meth:`reset` returns an observation in the observation space and a dict, and is deterministic under a seed
- :meth:`step` returns a well-typed transition and is deterministic under a seed
- the episode state machine rejects out-of-order calls

Soft issues, such as badly scaled action spaces, are reported with :func:`envcore.logger.warn`.
"""
from __future__ import annotations

from typing import Any

import numpy as np

from envcore import error, logger, spaces
from envcore.core import Env, EpisodeState
from envcore.utils import seeding


def data_equivalence(data_1: Any, data_2: Any, exact: bool = False) -> bool:
    """Assert equality between data 1 and 2, i.e. observations, actions, info.

    Args:
        data_1: data structure 1
        data_2: data structure 2
        exact: whether to compare array exactly or not if false compares with absolute and relative tolerance of 1e-5 (for more information check [np.allclose](https://numpy.org/doc/stable/reference/generated/numpy.allclose.html)).

    Returns:
        If observation 1 and 2 are equivalent
    """
    if type(data_1) is not type(data_2):
        return False
    if isinstance(data_1, dict):
        return data_1.keys() == data_2.keys() and all(
            data_equivalence(data_1[k], data_2[k], exact) for k in data_1.keys()
        )
    elif isinstance(data_1, (tuple, list)):
        return len(data_1) == len(data_2) and all(
            data_equivalence(o_1, o_2, exact) for o_1, o_2 in zip(data_1, data_2)
        )
    elif isinstance(data_1, np.ndarray):
        if data_1.shape == data_2.shape and data_1.dtype == data_2.dtype:
            if data_1.dtype == object:
                return all(
                    data_equivalence(a, b, exact) for a, b in zip(data_1.flat, data_2.flat)
                )
            if exact:
                return bool(np.all(data_1 == data_2))
            return bool(np.allclose(data_1, data_2, rtol=1e-5, atol=1e-5, equal_nan=True))
        return False
    else:
        return bool(data_1 == data_2)


def check_space(space: Any, space_type: str):
    """Check that the space is an envcore space."""
    assert isinstance(
        space, spaces.Space
    ), f"The {space_type} space must inherit from `envcore.spaces.Space`, actual type: {type(space)}"


def check_space_limit(space: spaces.Space, space_type: str):
    """Check the space limit for only the Box space as a test that only runs as part of `check_env`."""
    if isinstance(space, spaces.Box):
        if np.any(np.equal(space.low, space.high)):
            logger.warn(
                f"A Box {space_type} space has a dimension with equal low and high bounds, {space}. This dimension carries no information."
            )

        # Check that the Box space is normalized
        if space_type == "action":
            if len(space.shape) == 1:  # for vector boxes
                if (
                    np.any(
                        np.logical_and(
                            space.low != np.zeros_like(space.low),
                            np.abs(space.low) != np.abs(space.high),
                        )
                    )
                    or np.any(space.low < -1)
                    or np.any(space.high > 1)
                ):
                    logger.warn(
                        "For Box action spaces, we recommend using a symmetric and normalized space (range=[-1, 1] or [0, 1]). "
                        "See https://stable-baselines3.readthedocs.io/en/master/guide/rl_tips.html for more information."
                    )
    elif isinstance(space, spaces.Tuple):
        for subspace in space.spaces:
            check_space_limit(subspace, space_type)
    elif isinstance(space, spaces.Dict):
        for subspace in space.values():
            check_space_limit(subspace, space_type)
    elif isinstance(space, spaces.Sequence):
        check_space_limit(space.feature_space, space_type)


def check_reset_seed_determinism(env: Env, seed: int):
    """Check that the environment can be reset with a seed and is deterministic under it.

    Args:
        env: The environment to check
        seed: The seed to reset with
    """
    obs_1, info = env.reset(seed=seed)
    assert (
        obs_1 in env.observation_space
    ), "The observation returned by `env.reset(seed=...)` is not within the observation space."
    assert isinstance(
        info, dict
    ), f"The second element returned by `env.reset()` was not a dictionary, actual type: {type(info)}"
    assert (
        env.np_random_seed == seed
    ), f"Expects the environment seed to be {seed} after `env.reset(seed={seed})`, actual: {env.np_random_seed}"

    rng_state = env.np_random.bit_generator.state
    obs_2, _ = env.reset(seed=seed)
    assert data_equivalence(
        obs_1, obs_2
    ), "Using `env.reset(seed=...)` is non-deterministic as the observations are not equivalent."
    assert (
        env.np_random.bit_generator.state == rng_state
    ), "The environment's random number generator is in a different state after two resets with the same seed."

    env.reset(seed=None)
    assert (
        env.np_random_seed == seed
    ), "`env.reset(seed=None)` must not re-seed the environment's random number generator."


def check_step_determinism(env: Env, seed: int):
    """Check that taking the same action from the same seeded reset gives the same transition."""
    action = env.action_space.sample(rng=seeding.np_random(seed)[0])

    env.reset(seed=seed)
    transition_1 = env.step(action)
    assert (
        len(transition_1) == 5
    ), f"Expects `env.step()` to return (observation, reward, terminated, truncated, info), actual: {transition_1}"
    obs, reward, terminated, truncated, info = transition_1
    assert obs in env.observation_space, "The observation returned by `env.step()` is not within the observation space."
    assert isinstance(reward, float) and np.isfinite(reward), f"The reward is not a finite float, actual: {reward!r}"
    assert isinstance(terminated, bool), f"Expects `terminated` to be a bool, actual type: {type(terminated)}"
    assert isinstance(truncated, bool), f"Expects `truncated` to be a bool, actual type: {type(truncated)}"
    assert isinstance(info, dict), f"Expects `info` to be a dict, actual type: {type(info)}"
    assert env.elapsed_steps == 1, f"Expects one elapsed step after the first step, actual: {env.elapsed_steps}"

    env.reset(seed=seed)
    transition_2 = env.step(action)
    info_1, info_2 = (
        {k: v for k, v in transition[4].items() if k != "episode"}
        for transition in (transition_1, transition_2)
    )
    assert data_equivalence(
        transition_1[:4], transition_2[:4]
    ) and data_equivalence(
        info_1, info_2
    ), "Deterministic step: the same action from the same seeded reset produced different transitions."


def check_episode_protocol(env: Env, seed: int, max_steps: int = 10_000):
    """Check that an episode runs to its end and that the environment then refuses to step.

    Args:
        env: The environment to check
        seed: The seed to reset and sample actions with
        max_steps: Give up on reaching the episode end after this many steps
    """
    action_rng, _ = seeding.np_random(seed)
    env.reset(seed=seed)
    for _ in range(max_steps):
        _, _, terminated, truncated, info = env.step(env.action_space.sample(rng=action_rng))
        if terminated or truncated:
            assert "episode" in info, "The final `info` of an episode is missing the episode statistics."
            break
    else:
        logger.warn(
            f"The episode did not end within {max_steps} random steps, the terminal state protocol was not checked."
        )
        return

    assert env.episode_state is EpisodeState.TERMINAL
    try:
        env.step(env.action_space.sample(rng=action_rng))
    except error.StateViolation:
        pass
    else:
        raise AssertionError("`env.step()` after the end of an episode must raise `StateViolation`.")


def check_env(env: Env, seed: int = 0):
    """Check that an environment follows the envcore API.

    The environment is reset and stepped several times; it is left ``TERMINAL`` or ``READY`` afterwards.

    Args:
        env: The environment that will be checked
        seed: The seed used for every reset and action sample of the check

    Raises:
        AssertionError: The environment breaks the contract
    """
    assert isinstance(
        env, Env
    ), f"The environment must inherit from the envcore.Env class, actual class: {type(env)}."
    assert not env.closed, "Cannot check a closed environment."

    check_space(env.action_space, "action")
    check_space(env.observation_space, "observation")
    check_space_limit(env.action_space, "action")
    check_space_limit(env.observation_space, "observation")

    if env.episode_state is EpisodeState.UNSTARTED:
        try:
            env.step(env.action_space.sample(rng=seeding.np_random(seed)[0]))
        except error.StateViolation:
            pass
        else:
            raise AssertionError("`env.step()` before `env.reset()` must raise `StateViolation`.")

    check_reset_seed_determinism(env, seed)
    check_step_determinism(env, seed)
    check_episode_protocol(env, seed)
    logger.info(f"{env} passed the environment checker")
