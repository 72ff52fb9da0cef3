"""
Classic cart-pole system implemented by Rich Sutton et al.
Dynamics, including friction, from: https://coneural.org/florian/papers/05_cart_pole.pdf
"""
from __future__ import annotations

import math
from typing import Any

import numpy as np

from envcore import spaces
from envcore.core import Env
from envcore.envs.utils import runge_kutta


class CartPoleEnv(Env[np.ndarray, np.int64]):
    """
    ## Description

    This environment corresponds to the version of the cart-pole problem described by Barto, Sutton, and Anderson in
    ["Neuronlike Adaptive Elements That Can Solve Difficult Learning Control Problem"](https://ieeexplore.ieee.org/document/6313077).
    A pole is attached by an un-actuated joint to a cart, which moves along a track.
    The pendulum is placed upright on the cart and the goal is to balance the pole by applying forces in the left
    and right direction on the cart.

    The dynamics follow ["Correct equations for the dynamics of the cart-pole system"](https://coneural.org/florian/papers/05_cart_pole.pdf)
    and are integrated with fourth-order Runge-Kutta. Setting `mu_cart` or `mu_pole` adds friction between the
    cart and the track or at the joint; both default to 0, the frictionless system.

    ## Action Space

    The action is a `Discrete(2)` value indicating the direction of the fixed force the cart is pushed with.

    - 0: Push cart to the left
    - 1: Push cart to the right

    ## Observation Space

    The observation is a `ndarray` with shape `(4,)` with the values corresponding to the following positions and velocities:

    | Num | Observation           | Min                 | Max               |
    |-----|-----------------------|---------------------|-------------------|
    | 0   | Cart Position         | -4.8                | 4.8               |
    | 1   | Cart Velocity         | -Inf                | Inf               |
    | 2   | Pole Angle            | ~ -0.418 rad (-24°) | ~ 0.418 rad (24°) |
    | 3   | Pole Angular Velocity | -Inf                | Inf               |

    ## Rewards

    A reward of `+1` is given for every step taken, including the termination step.

    ## Starting State

    All observations are assigned a uniformly random value in `(-0.05, 0.05)`

    ## Episode End

    The episode ends if any one of the following occurs:

    1. Termination: Pole Angle is greater than ±12°
    2. Termination: Cart Position is greater than ±2.4 (center of the cart reaches the edge of the display)
    3. Truncation: Episode length is greater than 500

    ## Arguments

    ```python
    env = CartPoleEnv(seed=42, mu_cart=0.0005, mu_pole=0.000002)
    ```
    """

    max_episode_steps = 500

    def __init__(
        self,
        *,
        seed: int | None = None,
        mu_cart: float = 0.0,
        mu_pole: float = 0.0,
    ):
        super().__init__(seed=seed)
        ##################################################
        # SYSTEM DIMENSIONS
        ##################################################
        self.gravity = 9.8
        self.masscart = 1.0
        self.masspole = 0.1
        self.total_mass = self.masspole + self.masscart
        self.length = 0.5  # actually half the pole's length
        self.polemass_length = self.masspole * self.length
        self.force_mag = 10.0
        self.tau = 0.02  # seconds between state updates

        # friction
        self.mu_cart = mu_cart  # coeff friction of cart on the track
        self.mu_pole = mu_pole  # coeff friction of pole on the cart
        self._normal_force_sign = 1.0

        ##################################################
        # CONSTRAINTS
        ##################################################
        # Angle at which to fail the episode
        self.theta_threshold_radians = 12 * 2 * math.pi / 360
        self.x_threshold = 2.4

        # Angle limit set to 2 * theta_threshold_radians so failing observation
        # is still within bounds.
        high = np.array(
            [
                self.x_threshold * 2,
                np.inf,
                self.theta_threshold_radians * 2,
                np.inf,
            ],
            dtype=np.float32,
        )

        ##################################################
        # DEFINE ACTION AND OBSERVATION SPACE
        ##################################################
        self.action_space = spaces.Discrete(2)
        self.observation_space = spaces.Box(-high, high, dtype=np.float32)

        # (CartPosition, CartVelocity, PoleAngle, PoleAngVelocity)
        self.state: np.ndarray | None = None

    def _reset(self, *, options: dict[str, Any] | None = None):
        self.state = self.np_random.uniform(low=-0.05, high=0.05, size=(4,))
        self._normal_force_sign = 1.0
        return np.array(self.state, dtype=np.float32), {}

    def _step(self, action):
        force = self.force_mag if action == 1 else -self.force_mag
        self.state = runge_kutta(self._dynamics, self.state, force, self.tau)
        self._normal_force_sign = self._sign(self._normal_force(self.state, force))

        x, _, theta, _ = self.state
        terminated = bool(
            x < -self.x_threshold
            or x > self.x_threshold
            or theta < -self.theta_threshold_radians
            or theta > self.theta_threshold_radians
        )

        return np.array(self.state, dtype=np.float32), 1.0, terminated, False, {}

    def _dynamics(self, state, force):
        """Time derivative ``(x_dot, x_acc, theta_dot, theta_acc)`` of ``state`` under ``force``."""
        x, x_dot, theta, theta_dot = state
        theta_acc = self._theta_acc(state, force, self._normal_force_sign)

        normal_force = self._normal_force_from(theta, theta_dot, theta_acc)
        if self._sign(normal_force) != self._normal_force_sign:
            # the cart lifted off (or landed on) the track, redo with the new contact direction
            theta_acc = self._theta_acc(state, force, self._sign(normal_force))
            normal_force = self._normal_force_from(theta, theta_dot, theta_acc)

        costheta = math.cos(theta)
        sintheta = math.sin(theta)
        x_acc = (
            force
            + self.polemass_length * (theta_dot**2 * sintheta - theta_acc * costheta)
            - self.mu_cart * normal_force * self._sign(normal_force * x_dot)
        ) / self.total_mass

        return np.array([x_dot, x_acc, theta_dot, theta_acc])

    def _theta_acc(self, state, force, normal_force_sign):
        _, x_dot, theta, theta_dot = state
        costheta = math.cos(theta)
        sintheta = math.sin(theta)
        friction_sign = self._sign(normal_force_sign * x_dot)

        numerator = (
            self.gravity * sintheta
            + costheta
            * (
                (
                    -force
                    - self.polemass_length
                    * theta_dot**2
                    * (sintheta + self.mu_cart * friction_sign * costheta)
                )
                / self.total_mass
                + self.mu_cart * self.gravity * friction_sign
            )
            - self.mu_pole * theta_dot / self.polemass_length
        )
        denominator = self.length * (
            4.0 / 3.0
            - self.masspole * costheta / self.total_mass * (costheta - self.mu_cart * friction_sign)
        )
        return numerator / denominator

    def _normal_force(self, state, force):
        _, _, theta, theta_dot = state
        theta_acc = self._theta_acc(state, force, self._normal_force_sign)
        return self._normal_force_from(theta, theta_dot, theta_acc)

    def _normal_force_from(self, theta, theta_dot, theta_acc):
        return self.total_mass * self.gravity - self.polemass_length * (
            theta_acc * math.sin(theta) + theta_dot**2 * math.cos(theta)
        )

    @staticmethod
    def _sign(value) -> float:
        return float(np.sign(value))
