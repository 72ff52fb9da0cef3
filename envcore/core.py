"""Core API for Environment."""
from __future__ import annotations

import math
import time
from enum import Enum
from typing import Any, Generic, SupportsFloat, TypeVar

import numpy as np

from envcore import error, logger, spaces
from envcore.utils import seeding

ObsType = TypeVar("ObsType")
ActType = TypeVar("ActType")


class EpisodeState(Enum):
    """Where an environment is in its episode lifecycle.

    ``UNSTARTED`` until the first :meth:`Env.reset`, ``READY`` while an episode is running and ``TERMINAL``
    once a step returned ``terminated`` or ``truncated``. Only ``READY`` accepts :meth:`Env.step`.
    """

    UNSTARTED = "unstarted"
    READY = "ready"
    TERMINAL = "terminal"


class Env(Generic[ObsType, ActType]):
    r"""The main class for implementing Reinforcement Learning Agents environments.

    The class encapsulates an environment with arbitrary behind-the-scenes dynamics through the :meth:`step` and
    :meth:`reset` functions. An environment can be partially or fully observed by single agents.

    The main API methods that users of this class need to know are:

    - :meth:`step` - Updates an environment with actions returning the next agent observation, the reward for taking
      that actions, if the environment has terminated or truncated due to the latest action and information from
      the environment about the step, i.e. metrics, debug info.
    - :meth:`reset` - Resets the environment to an initial state, required before calling step.
      Returns the first agent observation for an episode and information, i.e. metrics, debug info.
    - :meth:`close` - Closes the environment, important when external software is used, i.e. pygame for rendering,
      databases

    Environments have additional attributes for users to understand the implementation

    - :attr:`action_space` - The Space object corresponding to valid actions, all valid actions should be contained
      within the space.
    - :attr:`observation_space` - The Space object corresponding to valid observations, all valid observations
      should be contained within the space.
    - :attr:`max_episode_steps` - If set, episodes are truncated once this many steps have been taken.
    - :attr:`metadata` - Free-form, read-only facts about the environment, empty by default
    - :attr:`np_random` - The random number generator for the environment. This is automatically assigned during
      ``super().__init__(seed=seed)`` or :meth:`reset` with a seed and when assessing :attr:`np_random`.

    The public methods enforce the episode protocol. Subclasses only implement the dynamics:

    - :meth:`_reset` - produce the first observation and info of an episode
    - :meth:`_step` - advance the simulation by one action that is already known to be valid
    - :meth:`_close` - release whatever the environment acquired, called at most once

    Note:
        To get reproducible sampling of actions, a seed can be set with ``env.action_space.seed(123)``.

    Note:
        An environment instance is not safe to use from several threads at once. Run several instances
        (see :func:`envcore.utils.seeding.derive_seeds`) to scale out.
    """

    # Set this in SOME subclasses
    metadata: dict[str, Any] = {}

    # Set these in ALL subclasses
    action_space: spaces.Space[ActType]
    observation_space: spaces.Space[ObsType]
    max_episode_steps: int | None = None

    # Created
    _np_random: np.random.Generator | None = None
    _np_random_seed: int | None = None
    _episode_state: EpisodeState = EpisodeState.UNSTARTED
    _elapsed_steps: int = 0
    _episode_return: float = 0.0
    _episode_start: float = 0.0
    _closed: bool = False

    def __init__(self, *, seed: int | None = None):
        """Initialises the environment, optionally deriving its random number generator from ``seed``.

        Args:
            seed: The seed used to derive :attr:`np_random`. Without one the generator is seeded from entropy the
                first time it is needed.
        """
        if seed is not None:
            self._np_random, self._np_random_seed = seeding.np_random(seed)

    def reset(
        self,
        *,
        seed: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[ObsType, dict[str, Any]]:  # type: ignore
        """Resets the environment to an initial internal state, returning an initial observation and info.

        This method generates a new starting state often with some randomness to ensure that the agent explores the
        state space and learns a generalised policy about the environment. This randomness can be controlled
        with the ``seed`` parameter otherwise if the environment already has a random number generator and
        :meth:`reset` is called with ``seed=None``, the RNG is not reset.

        Therefore, :meth:`reset` should (in the typical use case) be called with a seed right after initialization
        and then never again.

        Calling :meth:`reset` while an episode is still running abandons that episode.

        Args:
            seed (optional int): The seed that is used to initialize the environment's PRNG (`np_random`) and
                the read-only attribute `np_random_seed`.
                If the environment does not already have a PRNG and ``seed=None`` (the default option) is passed,
                a seed will be chosen from some source of entropy (e.g. timestamp or /dev/urandom).
                However, if the environment already has a PRNG and ``seed=None`` is passed, the PRNG will *not* be reset
                and the env's :attr:`np_random_seed` will *not* be altered.
                If you pass an integer, the PRNG will be reset even if it already exists.
            options (optional dict): Additional information to specify how the environment is reset (optional,
                depending on the specific environment)

        Returns:
            observation (ObsType): Observation of the initial state. This will be an element of :attr:`observation_space`
                (typically a numpy array) and is analogous to the observation returned by :meth:`step`.
            info (dictionary):  This dictionary contains auxiliary information complementing ``observation``. It should be analogous to
                the ``info`` returned by :meth:`step`.

        Raises:
            ClosedEnvironmentError: The environment has been closed.
            InvalidSeed: The seed is not a non-negative integer.
            InvalidObservation: The initial observation is not contained in :attr:`observation_space`.
        """
        if self._closed:
            raise error.ClosedEnvironmentError(f"Cannot call `reset` on a closed environment, {self}")

        # Initialize the RNG if the seed is manually passed
        if seed is not None:
            self._np_random, self._np_random_seed = seeding.np_random(seed)
            logger.debug("%s seeded with %s", self, seed)
        if self._episode_state is EpisodeState.READY:
            logger.debug("%s reset after %d steps, episode abandoned", self, self._elapsed_steps)

        obs, info = self._reset(options=options)
        if not self.observation_space.contains(obs):
            self._episode_state = EpisodeState.TERMINAL
            raise error.InvalidObservation(
                f"The observation returned by `reset()` is not within the observation space, {obs!r} not in {self.observation_space}"
            )

        self._elapsed_steps = 0
        self._episode_return = 0.0
        self._episode_start = time.perf_counter()
        self._episode_state = EpisodeState.READY
        return obs, info

    def step(
        self, action: ActType
    ) -> tuple[ObsType, float, bool, bool, dict[str, Any]]:
        """Run one timestep of the environment's dynamics using the agent actions.

        When the end of an episode is reached (``terminated or truncated``), it is necessary to call :meth:`reset` to
        reset this environment's state for the next episode.

        Args:
            action (ActType): an action provided by the agent to update the environment state.

        Returns:
            observation (ObsType): An element of the environment's :attr:`observation_space` as the next observation due to the agent actions.
                An example is a numpy array containing the positions and velocities of the pole in CartPole.
            reward (float): The reward as a result of taking the action, always finite.
            terminated (bool): Whether the agent reaches the terminal state (as defined under the MDP of the task)
                which can be positive or negative. An example is reaching the goal state or moving into the lava from
                the Sutton and Barton, Gridworld. If true, the user needs to call :meth:`reset`.
            truncated (bool): Whether the truncation condition outside the scope of the MDP is satisfied.
                Typically, this is a timelimit (see :attr:`max_episode_steps`), but could also be used to indicate an
                agent physically going out of bounds. Can be used to end the episode prematurely before a terminal
                state is reached. If true, the user needs to call :meth:`reset`.
                ``terminated`` and ``truncated`` may both be true, e.g. when the goal is reached on the last allowed step.
            info (dict): Contains auxiliary diagnostic information (helpful for debugging, learning, and logging).
                When the episode ends, ``info["episode"]`` holds the episode return ``"r"``, length ``"l"`` and
                elapsed wall-clock seconds ``"t"``.

        Raises:
            StateViolation: The environment is not ``READY``, i.e. :meth:`reset` was never called or the episode ended.
            ClosedEnvironmentError: The environment has been closed.
            InvalidAction: ``action`` is not contained in :attr:`action_space`. The environment is left untouched.
            InvalidObservation: The environment produced an observation outside :attr:`observation_space`.
            InvalidReward: The environment produced a reward that is not a finite real number.
        """
        if self._closed:
            raise error.ClosedEnvironmentError(f"Cannot call `step` on a closed environment, {self}")
        if self._episode_state is EpisodeState.UNSTARTED:
            raise error.StateViolation("Cannot call `env.step()` before calling `env.reset()`")
        if self._episode_state is EpisodeState.TERMINAL:
            raise error.StateViolation(
                "Cannot call `env.step()` after the episode has terminated or truncated, call `env.reset()` first"
            )
        if not self.action_space.contains(action):
            raise error.InvalidAction(f"{action!r} ({type(action)}) invalid for {self.action_space}")

        obs, reward, terminated, truncated, info = self._step(action)

        if not self.observation_space.contains(obs):
            self._episode_state = EpisodeState.TERMINAL
            raise error.InvalidObservation(
                f"The observation returned by `step()` is not within the observation space, {obs!r} not in {self.observation_space}"
            )
        try:
            reward = float(reward)
        except (TypeError, ValueError) as e:
            self._episode_state = EpisodeState.TERMINAL
            raise error.InvalidReward(f"Reward must be a real number, actual: {reward!r}") from e
        if not math.isfinite(reward):
            self._episode_state = EpisodeState.TERMINAL
            raise error.InvalidReward(f"Reward must be finite, actual: {reward}")

        self._elapsed_steps += 1
        self._episode_return += reward

        terminated, truncated = bool(terminated), bool(truncated)
        if self.max_episode_steps is not None and self._elapsed_steps >= self.max_episode_steps:
            truncated = True

        if terminated or truncated:
            self._episode_state = EpisodeState.TERMINAL
            info["episode"] = {
                "r": self._episode_return,
                "l": self._elapsed_steps,
                "t": round(time.perf_counter() - self._episode_start, 6),
            }

        return obs, reward, terminated, truncated, info

    def close(self):
        """After the user has finished using the environment, close contains the code necessary to "clean up" the environment.

        This is critical for closing rendering windows, database or HTTP connections.
        Calling ``close`` on an already closed environment has no effect and won't raise an error.

        Raises:
            ResourceError: Releasing a resource held by the environment failed.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._close()
        except Exception as e:
            logger.error("Failed to close %s: %s", self, e)
            raise error.ResourceError(f"Failed to release the resources of {self}") from e

    def _reset(
        self, *, options: dict[str, Any] | None = None
    ) -> tuple[ObsType, dict[str, Any]]:
        """Creates the initial state of a new episode, drawing any randomness from :attr:`np_random`."""
        raise NotImplementedError

    def _step(
        self, action: ActType
    ) -> tuple[ObsType, SupportsFloat, bool, bool, dict[str, Any]]:
        """Advances the simulation by ``action``, which is guaranteed to be in :attr:`action_space`."""
        raise NotImplementedError

    def _close(self):
        """Releases the resources acquired by the environment, nothing by default."""

    @property
    def np_random(self) -> np.random.Generator:
        """Returns the environment's internal :attr:`_np_random` that if not set will initialise with a random seed.

        Returns:
            Instances of `np.random.Generator`
        """
        if self._np_random is None:
            self._np_random, self._np_random_seed = seeding.np_random()
        return self._np_random

    @np_random.setter
    def np_random(self, value: np.random.Generator):
        """Sets the environment's internal :attr:`_np_random` with the user-provided Generator.

        Since it is generally not possible to extract a seed from an instance of a random number generator,
        this will also set the :attr:`_np_random_seed` to `-1`, which is not valid as an input for the creation
        of a numpy rng.
        """
        self._np_random = value
        # Setting a numpy rng with -1 will cause a ValueError
        self._np_random_seed = -1

    @property
    def np_random_seed(self) -> int:
        """Returns the environment's internal :attr:`_np_random_seed` that if not set will first initialise with a random int as seed.

        If :attr:`np_random` was set directly instead of through :meth:`reset`, the seed will take the value -1.

        Returns:
            int: the seed of the current `np_random` or -1, if the seed of the rng is unknown
        """
        if self._np_random_seed is None:
            self._np_random, self._np_random_seed = seeding.np_random()
        return self._np_random_seed

    @property
    def episode_state(self) -> EpisodeState:
        """Where the environment is in its episode lifecycle."""
        return self._episode_state

    @property
    def elapsed_steps(self) -> int:
        """The number of successful steps taken since the last :meth:`reset`."""
        return self._elapsed_steps

    @property
    def needs_reset(self) -> bool:
        """Whether :meth:`reset` must be called before the next :meth:`step`."""
        return self._episode_state is not EpisodeState.READY

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    @property
    def unwrapped(self) -> Env[ObsType, ActType]:
        """Returns the base non-wrapped environment.

        Returns:
            Env: The base non-wrapped :class:`envcore.Env` instance
        """
        return self

    def __str__(self):
        """Returns a string of the environment with its class name.

        Returns:
            A string identifying the environment
        """
        return f"<{type(self).__name__} instance>"

    def __enter__(self):
        """Support with-statement for the environment."""
        return self

    def __exit__(self, *args: Any):
        """Support with-statement for the environment and closes the environment."""
        self.close()
        # propagate exception
        return False
