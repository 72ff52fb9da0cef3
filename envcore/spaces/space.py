"""Implementation of the `Space` metaclass."""
from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

import numpy as np
import numpy.typing as npt

from envcore.utils import seeding

T_cov = TypeVar("T_cov", covariant=True)


class Space(Generic[T_cov]):
    """Superclass that is used to define observation and action spaces.

    Spaces are crucially used to define the format of valid actions and observations.
    They serve various purposes:

    * They clearly define how to interact with environments, i.e. they specify what actions need to look like
      and what observations will look like
    * They allow us to validate actions before they reach the simulation, see :meth:`contains`
    * They provide a method to sample random elements. This is especially useful for exploration and debugging.

    Different spaces can be combined hierarchically via container spaces (:class:`Tuple`, :class:`Dict` and
    :class:`Sequence`) to build a more expressive space.

    The family of spaces is closed: :class:`Discrete`, :class:`Box`, :class:`MultiDiscrete`,
    :class:`MultiBinary`, :class:`Tuple`, :class:`Dict` and :class:`Sequence`.

    Note:
        A space only owns metadata and, optionally, a random number generator that :meth:`sample` falls back to
        when no generator is passed in. To get reproducible sampling of actions, a seed can be set with
        ``space.seed(seed)`` or a seeded generator can be passed as ``space.sample(rng=rng)``.
    """

    def __init__(
        self,
        shape: Sequence[int] | None = None,
        dtype: npt.DTypeLike | None = None,
        seed: int | np.random.Generator | None = None,
    ):
        """Constructor of :class:`Space`.

        Args:
            shape (Optional[Sequence[int]]): If elements of the space are numpy arrays, this should specify their shape.
            dtype (Optional[Type | str]): If elements of the space are numpy arrays, this should specify their dtype.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space
        """
        self._shape = None if shape is None else tuple(shape)
        self.dtype = None if dtype is None else np.dtype(dtype)
        self._np_random = None
        self._np_random_seed = None
        if seed is not None:
            if isinstance(seed, np.random.Generator):
                self._np_random = seed
            else:
                self.seed(seed)

    @property
    def np_random(self) -> np.random.Generator:
        """Lazily seed the PRNG since this is expensive and only needed if sampling from this space.

        As :meth:`seed` is not guaranteed to set the `_np_random` for particular seeds. We add a
        check after :meth:`seed` to set a new random number generator.
        """
        if self._np_random is None:
            self.seed()

        return self._np_random  # pyright: ignore [reportGeneralTypeIssues]

    @property
    def shape(self) -> tuple[int, ...] | None:
        """Return the shape of the space as an immutable property."""
        return self._shape

    def sample(
        self, mask: Any | None = None, rng: np.random.Generator | None = None
    ) -> T_cov:
        """Randomly sample an element of this space.

        Can be uniform or non-uniform sampling based on boundedness of space.

        Args:
            mask: A mask used for sampling, expected ``dtype=np.int8`` and see sample implementation for expected shape.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            A sampled actions from the space
        """
        raise NotImplementedError

    def seed(self, seed: int | None = None) -> int:
        """Seed the PRNG of this space and, if applicable, the PRNGs of subspaces.

        Args:
            seed: The seed value for the space. If ``None`` the generator is seeded from entropy.

        Returns:
            The effective seed, so an entropy seed can be logged and replayed.
        """
        self._np_random, self._np_random_seed = seeding.np_random(seed)
        return self._np_random_seed

    def _rng(self, rng: np.random.Generator | None) -> np.random.Generator:
        return self.np_random if rng is None else rng

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space, equivalent to ``sample in space``.

        The check never raises: values of the wrong type, shape or range simply return ``False``.
        """
        raise NotImplementedError

    def __contains__(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        return self.contains(x)
