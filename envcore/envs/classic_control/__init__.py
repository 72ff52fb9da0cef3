from envcore.envs.classic_control.cartpole import CartPoleEnv
from envcore.envs.classic_control.mountain_car import MountainCarEnv
from envcore.envs.classic_control.pendulum import PendulumEnv
