from __future__ import annotations

from typing import Any

import numpy as np

from envcore import spaces
from envcore.core import Env

__credits__ = ["Carlos Luis"]

DEFAULT_X = np.pi
DEFAULT_Y = 1.0


class PendulumEnv(Env[np.ndarray, np.ndarray]):
    r"""
    ## Description

    Swing a rigid pole, hinged at one end, up to the vertical and hold it there. The only control is a bounded
    torque at the hinge, too weak to lift the pole directly, so the agent has to pump energy into the swing first.

    Angles are measured from the upright position, positive counter-clockwise, in radians; torque is in `N m`.

    ## Action Space

    `Box(-2.0, 2.0, (1,), float32)`: the hinge torque. The range is not normalised, so
    :func:`envcore.utils.env_checker.check_env` reports it.

    ## Observation Space

    `Box([-1, -1, -8], [1, 1, 8], (3,), float32)`: `cos(theta)`, `sin(theta)` and the angular velocity in rad/s,
    which saturates at 8.

    ## Rewards

    Every step costs the squared normalised angle plus `0.1` times the squared angular velocity plus `0.001` times
    the squared torque, so rewards lie in `[-16.2736044, 0]` and only the balanced, motionless, unactuated pole
    earns 0.

    ## Starting State

    `theta` is uniform in `[-pi, pi]` and the angular velocity uniform in `[-1, 1]`. Both ranges can be narrowed
    per episode, `env.reset(options={"x_init": 0.5, "y_init": 0.2})` draws `theta` from `[-0.5, 0.5]` and the
    angular velocity from `[-0.2, 0.2]`.

    ## Episode Truncation

    There is no terminal state, episodes are truncated after 200 steps.

    ## Arguments

    - `g`: gravitational acceleration in m/s², 10.0 by default.

    ```python
    env = PendulumEnv(seed=0, g=9.81)
    ```
    """

    max_episode_steps = 200

    def __init__(self, *, seed: int | None = None, g: float = 10.0):
        super().__init__(seed=seed)
        ##################################################
        # SYSTEM DIMENSIONS
        ##################################################
        self.max_speed = 8
        self.max_torque = 2.0
        self.dt = 0.05
        self.g = g
        self.m = 1.0
        self.l = 1.0

        ##################################################
        # DEFINE ACTION AND OBSERVATION SPACE
        ##################################################
        high = np.array([1.0, 1.0, self.max_speed], dtype=np.float32)
        # torque bounds are not normalised to [-1, 1], the environment checker warns about it
        self.action_space = spaces.Box(
            low=-self.max_torque, high=self.max_torque, shape=(1,), dtype=np.float32
        )
        self.observation_space = spaces.Box(low=-high, high=high, dtype=np.float32)

        # (theta, theta_dot)
        self.state: np.ndarray | None = None

    def _reset(self, *, options: dict[str, Any] | None = None):
        if options is None:
            high = np.array([DEFAULT_X, DEFAULT_Y])
        else:
            x = options.get("x_init", DEFAULT_X)
            y = options.get("y_init", DEFAULT_Y)
            high = np.array([abs(float(x)), abs(float(y))])
        low = -high
        self.state = self.np_random.uniform(low=low, high=high)
        return self._get_obs(), {}

    def _step(self, action):
        theta, theta_dot = self.state

        g = self.g
        m = self.m
        l = self.l
        dt = self.dt

        torque = float(np.asarray(action)[0])
        costs = angle_normalize(theta) ** 2 + 0.1 * theta_dot**2 + 0.001 * (torque**2)

        new_theta_dot = theta_dot + (3 * g / (2 * l) * np.sin(theta) + 3.0 / (m * l**2) * torque) * dt
        new_theta_dot = np.clip(new_theta_dot, -self.max_speed, self.max_speed)
        new_theta = theta + new_theta_dot * dt

        self.state = np.array([new_theta, new_theta_dot])
        return self._get_obs(), -costs, False, False, {}

    def _get_obs(self):
        theta, theta_dot = self.state
        return np.array([np.cos(theta), np.sin(theta), theta_dot], dtype=np.float32)


def angle_normalize(x):
    return ((x + np.pi) % (2 * np.pi)) - np.pi
