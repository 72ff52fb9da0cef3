import math

import numpy as np
import pytest

from envcore import Env, EpisodeState, error, spaces
from envcore.utils.env_checker import check_env


class RandomWalkEnv(Env[np.ndarray, np.int64]):
    """A walker on ``[-size, size]`` that terminates when it reaches either end."""

    def __init__(self, *, seed=None, size=10, max_episode_steps=None):
        super().__init__(seed=seed)
        self.size = size
        self.max_episode_steps = max_episode_steps
        self.action_space = spaces.Discrete(2)
        self.observation_space = spaces.Box(-size, size, shape=(1,), dtype=np.int64)
        self.position = 0

    def _reset(self, *, options=None):
        start = 0 if options is None else options.get("start", 0)
        self.position = int(self.np_random.integers(-2, 3)) if start == "random" else int(start)
        return self._get_obs(), {"start": self.position}

    def _step(self, action):
        noise = int(self.np_random.integers(0, 2))
        self.position += (1 if action == 1 else -1) * (1 + noise)
        self.position = max(-self.size, min(self.size, self.position))
        terminated = abs(self.position) == self.size
        return self._get_obs(), float(self.position) / self.size, terminated, False, {}

    def _get_obs(self):
        return np.array([self.position], dtype=np.int64)


class ResourceEnv(RandomWalkEnv):
    def __init__(self, fail_close=False, **kwargs):
        super().__init__(**kwargs)
        self.fail_close = fail_close
        self.close_calls = 0

    def _close(self):
        self.close_calls += 1
        if self.fail_close:
            raise OSError("connection already gone")


class BrokenEnv(RandomWalkEnv):
    def __init__(self, reward=0.0, obs=None, **kwargs):
        super().__init__(**kwargs)
        self.bad_reward = reward
        self.bad_obs = obs

    def _step(self, action):
        obs, _, terminated, truncated, info = super()._step(action)
        if self.bad_obs is not None:
            obs = self.bad_obs
        return obs, self.bad_reward, terminated, truncated, info


def test_reset_and_step_scenario():
    env = RandomWalkEnv(seed=42)
    assert env.episode_state is EpisodeState.UNSTARTED
    assert env.needs_reset

    obs, info = env.reset()
    assert obs in env.observation_space
    assert isinstance(info, dict)
    assert env.episode_state is EpisodeState.READY

    for step in range(1, 4):
        obs, reward, terminated, truncated, info = env.step(1)
        assert obs in env.observation_space
        assert isinstance(reward, float)
        assert terminated is False and truncated is False
        assert env.elapsed_steps == step

    with pytest.raises(error.InvalidAction):
        env.step(2)
    assert env.elapsed_steps == 3
    assert env.episode_state is EpisodeState.READY

    # the environment is untouched and keeps stepping
    env.step(0)
    assert env.elapsed_steps == 4


def test_constructor_seed():
    env = RandomWalkEnv(seed=42)
    assert env.np_random_seed == 42


def test_step_before_reset():
    env = RandomWalkEnv(seed=0)
    with pytest.raises(error.StateViolation):
        env.step(1)
    assert env.episode_state is EpisodeState.UNSTARTED


def test_step_after_termination():
    env = RandomWalkEnv(seed=0, size=3)
    env.reset()
    terminated = False
    while not terminated:
        _, _, terminated, truncated, info = env.step(1)
    assert not truncated
    assert env.episode_state is EpisodeState.TERMINAL
    assert env.needs_reset
    assert info["episode"]["l"] == env.elapsed_steps
    assert info["episode"]["r"] > 0

    with pytest.raises(error.StateViolation):
        env.step(1)

    env.reset()
    assert env.elapsed_steps == 0
    env.step(0)
    assert env.elapsed_steps == 1


def test_episode_statistics():
    env = RandomWalkEnv(seed=1, size=2)
    env.reset()
    total, length, terminated = 0.0, 0, False
    while not terminated:
        _, reward, terminated, _, info = env.step(0)
        total += reward
        length += 1
    assert info["episode"]["r"] == pytest.approx(total)
    assert info["episode"]["l"] == length
    assert info["episode"]["t"] >= 0


def test_truncation_by_max_episode_steps():
    env = RandomWalkEnv(seed=0, size=1000, max_episode_steps=5)
    env.reset()
    for _ in range(4):
        _, _, terminated, truncated, _ = env.step(1)
        assert not terminated and not truncated
    _, _, terminated, truncated, info = env.step(1)
    assert not terminated
    assert truncated
    assert "episode" in info
    with pytest.raises(error.StateViolation):
        env.step(1)


def test_both_flags_on_last_step():
    env = RandomWalkEnv(seed=0, size=1, max_episode_steps=1)
    env.reset()
    _, _, terminated, truncated, _ = env.step(1)
    assert terminated and truncated
    assert env.episode_state is EpisodeState.TERMINAL


def test_reset_from_ready_abandons_episode():
    env = RandomWalkEnv(seed=0)
    env.reset()
    env.step(1)
    env.step(1)
    obs, _ = env.reset(options={"start": -3})
    assert obs.tolist() == [-3]
    assert env.elapsed_steps == 0
    assert env.episode_state is EpisodeState.READY


def test_determinism_across_instances():
    env_1 = RandomWalkEnv(size=1000)
    env_2 = RandomWalkEnv(size=1000)
    obs_1, _ = env_1.reset(seed=7, options={"start": "random"})
    obs_2, _ = env_2.reset(seed=7, options={"start": "random"})
    assert np.array_equal(obs_1, obs_2)

    actions = np.random.default_rng(0).integers(0, 2, size=50)
    for action in actions:
        obs_1, reward_1, terminated_1, _, _ = env_1.step(action)
        obs_2, reward_2, terminated_2, _, _ = env_2.step(action)
        assert np.array_equal(obs_1, obs_2)
        assert reward_1 == reward_2
        assert terminated_1 == terminated_2


def test_reseeding_replays_episode():
    env = RandomWalkEnv(size=1000)
    env.reset(seed=3)
    first = [env.step(1)[0].item() for _ in range(20)]
    env.reset(seed=3)
    assert [env.step(1)[0].item() for _ in range(20)] == first


def test_reset_without_seed_keeps_rng():
    env = RandomWalkEnv(seed=5)
    env.reset()
    assert env.np_random_seed == 5
    env.reset()
    assert env.np_random_seed == 5
    env.reset(seed=6)
    assert env.np_random_seed == 6


def test_invalid_reset_seed():
    env = RandomWalkEnv()
    with pytest.raises(error.InvalidSeed):
        env.reset(seed=-1)


def test_np_random_setter():
    env = RandomWalkEnv()
    env.np_random = np.random.default_rng(0)
    assert env.np_random_seed == -1


def test_close_is_idempotent():
    env = ResourceEnv(seed=0)
    env.reset()
    env.close()
    env.close()
    assert env.closed
    assert env.close_calls == 1


def test_closed_environment_rejects_calls():
    env = ResourceEnv(seed=0)
    env.reset()
    env.close()
    with pytest.raises(error.ClosedEnvironmentError):
        env.step(1)
    with pytest.raises(error.ClosedEnvironmentError):
        env.reset()
    # closed environments also violate the episode protocol
    with pytest.raises(error.StateViolation):
        env.step(1)


def test_close_failure_raises_resource_error():
    env = ResourceEnv(fail_close=True, seed=0)
    with pytest.raises(error.ResourceError) as exc_info:
        env.close()
    assert isinstance(exc_info.value.__cause__, OSError)
    assert env.closed
    env.close()
    assert env.close_calls == 1


def test_context_manager_closes():
    with ResourceEnv(seed=0) as env:
        env.reset()
        env.step(1)
    assert env.closed
    assert env.close_calls == 1


def test_context_manager_propagates_exceptions():
    with pytest.raises(KeyError):
        with ResourceEnv(seed=0) as env:
            raise KeyError("boom")
    assert env.closed


def test_invalid_observation_from_step():
    env = BrokenEnv(seed=0, obs=np.array([1.5]))
    env.reset()
    with pytest.raises(error.InvalidObservation):
        env.step(1)
    assert env.episode_state is EpisodeState.TERMINAL
    with pytest.raises(error.StateViolation):
        env.step(1)


@pytest.mark.parametrize("reward", [math.nan, math.inf, "a lot", None])
def test_invalid_reward(reward):
    env = BrokenEnv(seed=0, reward=reward)
    env.reset()
    with pytest.raises(error.InvalidReward):
        env.step(1)
    assert env.episode_state is EpisodeState.TERMINAL


def test_reward_is_converted_to_float():
    env = BrokenEnv(seed=0, reward=np.float32(0.5))
    env.reset()
    _, reward, _, _, _ = env.step(1)
    assert type(reward) is float
    assert reward == 0.5


def test_invalid_observation_from_reset():
    class BadResetEnv(RandomWalkEnv):
        def _reset(self, *, options=None):
            return np.array([0.5]), {}

    env = BadResetEnv(seed=0)
    with pytest.raises(error.InvalidObservation):
        env.reset()
    assert env.episode_state is EpisodeState.TERMINAL


def test_unimplemented_hooks():
    class Empty(Env):
        action_space = spaces.Discrete(2)
        observation_space = spaces.Discrete(2)

    env = Empty()
    with pytest.raises(NotImplementedError):
        env.reset()


def test_str_and_unwrapped():
    env = RandomWalkEnv()
    assert str(env) == "<RandomWalkEnv instance>"
    assert env.unwrapped is env


def test_random_walk_passes_env_checker():
    check_env(RandomWalkEnv(size=5, max_episode_steps=100), seed=3)
