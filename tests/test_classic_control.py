import math

import numpy as np
import pytest

from envcore import EpisodeState, error
from envcore.envs import CartPoleEnv, MountainCarEnv, PendulumEnv
from envcore.envs.utils import bound, runge_kutta
from envcore.utils.env_checker import check_env


def test_runge_kutta_exponential_growth():
    state = runge_kutta(lambda s, a: a * s, np.array([1.0]), 1.0, 0.1)
    assert state.dtype == np.float64
    assert state[0] == pytest.approx(math.exp(0.1), rel=1e-6)


def test_runge_kutta_constant_input():
    # x_dot = v, v_dot = a
    state = runge_kutta(lambda s, a: np.array([s[1], a]), [0.0, 0.0], 2.0, 0.5)
    assert state.tolist() == pytest.approx([0.25, 1.0])


@pytest.mark.parametrize("x, expected", [(-2.0, -1.0), (0.5, 0.5), (3.0, 1.0)])
def test_bound(x, expected):
    assert bound(x, -1.0, 1.0) == expected


@pytest.mark.parametrize("env_cls", [CartPoleEnv, MountainCarEnv])
def test_discrete_envs_pass_env_checker(env_cls):
    check_env(env_cls(), seed=0)


def test_pendulum_passes_env_checker():
    with pytest.warns(UserWarning, match="symmetric and normalized"):
        check_env(PendulumEnv(), seed=0)


def test_cartpole_reset_range():
    env = CartPoleEnv(seed=0)
    for _ in range(20):
        obs, info = env.reset()
        assert obs.dtype == np.float32
        assert np.all(np.abs(obs) <= 0.05)
        assert info == {}


def test_cartpole_pole_falls_under_constant_push():
    env = CartPoleEnv(seed=0)
    env.reset()
    for _ in range(200):
        obs, reward, terminated, truncated, info = env.step(1)
        assert reward == 1.0
        if terminated:
            break
    assert terminated and not truncated
    assert obs[2] < 0
    assert info["episode"]["r"] == info["episode"]["l"]
    with pytest.raises(error.StateViolation):
        env.step(1)


def test_cartpole_friction_slows_the_cart():
    frictionless = CartPoleEnv(seed=3)
    rough = CartPoleEnv(seed=3, mu_cart=0.1, mu_pole=0.01)
    frictionless.reset()
    rough.reset()
    for _ in range(5):
        smooth_obs, *_ = frictionless.step(1)
        rough_obs, *_ = rough.step(1)
    assert rough_obs in rough.observation_space
    assert rough_obs[1] < smooth_obs[1]


def test_cartpole_rejects_invalid_action():
    env = CartPoleEnv(seed=0)
    env.reset()
    with pytest.raises(error.InvalidAction):
        env.step(2)
    assert env.elapsed_steps == 0


def test_mountain_car_reaches_goal():
    env = MountainCarEnv(seed=0)
    env.reset()
    env.state = np.array([0.49, 0.05])
    obs, reward, terminated, truncated, _ = env.step(2)
    assert reward == -1.0
    assert terminated and not truncated
    assert obs[0] >= env.goal_position


def test_mountain_car_left_wall_is_inelastic():
    env = MountainCarEnv(seed=0)
    env.reset()
    env.state = np.array([-1.19, -0.05])
    obs, _, terminated, _, _ = env.step(0)
    assert obs.tolist() == pytest.approx([-1.2, 0.0])
    assert not terminated


def test_mountain_car_truncates_at_200_steps():
    env = MountainCarEnv(seed=0)
    env.reset()
    for step in range(1, 201):
        _, _, terminated, truncated, info = env.step(1)
        assert not terminated
        assert truncated == (step == 200)
    assert info["episode"]["l"] == 200
    assert info["episode"]["r"] == -200.0
    assert env.episode_state is EpisodeState.TERMINAL


def test_mountain_car_observation_within_bounds():
    env = MountainCarEnv(seed=5)
    obs, _ = env.reset()
    assert -0.6 <= obs[0] <= -0.4
    assert obs[1] == 0.0


def test_pendulum_reset_options():
    env = PendulumEnv(seed=0)
    obs, _ = env.reset(options={"x_init": 0.0, "y_init": 0.0})
    assert obs.tolist() == pytest.approx([1.0, 0.0, 0.0])


def test_pendulum_reward_range():
    env = PendulumEnv(seed=0)
    env.reset()
    rng = np.random.default_rng(0)
    for _ in range(100):
        action = rng.uniform(-2.0, 2.0, size=(1,)).astype(np.float32)
        obs, reward, terminated, truncated, _ = env.step(action)
        assert -16.2736044 <= reward <= 0.0
        assert not terminated
        assert abs(obs[2]) <= 8.0


def test_pendulum_rejects_out_of_range_torque():
    env = PendulumEnv(seed=0)
    env.reset()
    with pytest.raises(error.InvalidAction):
        env.step(np.array([3.0], dtype=np.float32))
    with pytest.raises(error.InvalidAction):
        env.step(np.array([[1.0]], dtype=np.float32))


def test_pendulum_gravity():
    env = PendulumEnv(seed=0, g=0.0)
    env.reset(options={"x_init": 1.0, "y_init": 0.0})
    theta_before = np.arctan2(*env._get_obs()[1::-1])
    obs, *_ = env.step(np.zeros(1, dtype=np.float32))
    assert obs[2] == 0.0
    assert np.arctan2(obs[1], obs[0]) == pytest.approx(theta_before, abs=1e-6)


@pytest.mark.parametrize("env_cls", [CartPoleEnv, MountainCarEnv, PendulumEnv])
def test_seeded_episodes_are_reproducible(env_cls):
    env_1, env_2 = env_cls(), env_cls()
    obs_1, _ = env_1.reset(seed=7)
    obs_2, _ = env_2.reset(seed=7)
    assert np.array_equal(obs_1, obs_2)
    env_1.action_space.seed(7)
    env_2.action_space.seed(7)
    for _ in range(50):
        action = env_1.action_space.sample()
        assert np.array_equal(action, env_2.action_space.sample())
        obs_1, reward_1, terminated_1, truncated_1, _ = env_1.step(action)
        obs_2, reward_2, terminated_2, truncated_2, _ = env_2.step(action)
        assert np.array_equal(obs_1, obs_2)
        assert reward_1 == reward_2
        assert (terminated_1, truncated_1) == (terminated_2, truncated_2)
        if terminated_1 or truncated_1:
            break


def test_metadata_defaults_to_empty():
    from envcore import Env

    assert Env.metadata == {}
    assert not hasattr(Env, "reward_range")
    for env_cls in (CartPoleEnv, MountainCarEnv, PendulumEnv):
        assert "render_fps" not in env_cls.metadata
        assert "render_modes" not in env_cls.metadata
