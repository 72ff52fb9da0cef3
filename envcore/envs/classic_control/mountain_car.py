"""
http://incompleteideas.net/MountainCar/MountainCar1.cp
permalink: https://perma.cc/6Z2N-PFWC
"""
from __future__ import annotations

import math
from typing import Any

import numpy as np

from envcore import spaces
from envcore.core import Env
from envcore.envs.utils import bound


class MountainCarEnv(Env[np.ndarray, np.int64]):
    """
    ## Description

    The Mountain Car MDP is a deterministic MDP that consists of a car placed stochastically
    at the bottom of a sinusoidal valley, with the only possible actions being the accelerations
    that can be applied to the car in either direction. The goal of the MDP is to strategically
    accelerate the car to reach the goal state on top of the right hill.

    This MDP first appeared in [Andrew Moore's PhD Thesis (1990)](https://www.cl.cam.ac.uk/techreports/UCAM-CL-TR-209.pdf)

    ## Observation Space

    The observation is a `ndarray` with shape `(2,)` where the elements correspond to the following:

    | Num | Observation                          | Min   | Max  | Unit         |
    |-----|--------------------------------------|-------|------|--------------|
    | 0   | position of the car along the x-axis | -1.2  | 0.6  | position (m) |
    | 1   | velocity of the car                  | -0.07 | 0.07 | velocity (v) |

    ## Action Space

    There are 3 discrete deterministic actions:

    - 0: Accelerate to the left
    - 1: Don't accelerate
    - 2: Accelerate to the right

    ## Transition Dynamics:

    *velocity<sub>t+1</sub> = velocity<sub>t</sub> + (action - 1) * force - cos(3 * position<sub>t</sub>) * gravity*

    *position<sub>t+1</sub> = position<sub>t</sub> + velocity<sub>t+1</sub>*

    where force = 0.001 and gravity = 0.0025. The collisions at either end are inelastic with the velocity set to 0
    upon collision with the left wall. The position is clipped to the range `[-1.2, 0.6]` and
    velocity is clipped to the range `[-0.07, 0.07]`.

    ## Reward:

    The agent is penalised with a reward of -1 for each timestep.

    ## Starting State

    The position of the car is assigned a uniform random value in *[-0.6 , -0.4]*.
    The starting velocity of the car is always assigned to 0.

    ## Episode End

    The episode ends if either of the following happens:
    1. Termination: The position of the car is greater than or equal to `goal_position` (0.5 by default)
    2. Truncation: The length of the episode is 200.

    ## Arguments

    ```python
    env = MountainCarEnv(goal_velocity=0.01)
    ```
    """

    max_episode_steps = 200

    def __init__(self, *, seed: int | None = None, goal_velocity: float = 0.0):
        super().__init__(seed=seed)
        self.min_position = -1.2
        self.max_position = 0.6
        self.max_speed = 0.07
        self.goal_position = 0.5
        self.goal_velocity = goal_velocity

        ##################################################
        # SYSTEM DIMENSIONS
        ##################################################
        self.force = 0.001
        self.gravity = 0.0025

        ##################################################
        # DEFINE ACTION AND OBSERVATION SPACE
        ##################################################
        self.low = np.array([self.min_position, -self.max_speed], dtype=np.float32)
        self.high = np.array([self.max_position, self.max_speed], dtype=np.float32)

        self.action_space = spaces.Discrete(3)
        self.observation_space = spaces.Box(self.low, self.high, dtype=np.float32)

        # (position, velocity)
        self.state: np.ndarray | None = None

    def _reset(self, *, options: dict[str, Any] | None = None):
        self.state = np.array([self.np_random.uniform(low=-0.6, high=-0.4), 0.0])
        return self._get_obs(), {}

    def _step(self, action):
        position, velocity = self.state
        velocity += (int(action) - 1) * self.force + math.cos(3 * position) * (-self.gravity)
        velocity = bound(velocity, -self.max_speed, self.max_speed)
        position += velocity
        position = bound(position, self.min_position, self.max_position)
        if position == self.min_position and velocity < 0:
            velocity = 0.0

        terminated = bool(
            position >= self.goal_position and velocity >= self.goal_velocity
        )
        self.state = np.array([position, velocity])

        return self._get_obs(), -1.0, terminated, False, {}

    def _get_obs(self):
        # the float32 cast may round past the bounds, clip to the float32 bounds afterwards
        return np.clip(self.state.astype(np.float32), self.low, self.high)
