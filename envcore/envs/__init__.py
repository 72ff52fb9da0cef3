"""Reference environments implementing the :class:`envcore.Env` contract."""
from envcore.envs.classic_control import CartPoleEnv, MountainCarEnv, PendulumEnv

__all__ = ["CartPoleEnv", "MountainCarEnv", "PendulumEnv"]
