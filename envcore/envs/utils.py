"""Numerical helpers shared by the classic control environments."""
import numpy as np


def runge_kutta(dynamics_f, state, action, dt):
    """Advances ``state`` by ``dt`` seconds with the classic fourth-order Runge-Kutta scheme.

    See https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods

    Args:
        dynamics_f: ``dynamics_f(state, action) -> state_dot``, the time derivative of the state
        state: The current state vector
        action: The control input, held constant over the step
        dt: The integration step in seconds

    Returns:
        The state after ``dt`` seconds as a float64 array
    """
    state = np.asarray(state, dtype=np.float64)
    k1 = dynamics_f(state, action)
    k2 = dynamics_f(state + 0.5 * dt * k1, action)
    k3 = dynamics_f(state + 0.5 * dt * k2, action)
    k4 = dynamics_f(state + dt * k3, action)
    return state + (k1 + 2 * k2 + 2 * k3 + k4) * dt / 6


def bound(x, low, high):
    """Clamps the scalar ``x`` into ``[low, high]``."""
    return min(max(x, low), high)
