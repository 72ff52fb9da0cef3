"""Implementation of a space that represents finite-length sequences."""
from __future__ import annotations

import typing
from typing import Any

import numpy as np

from envcore import error
from envcore.spaces.space import Space
from envcore.utils import seeding


class Sequence(Space[typing.Tuple[Any, ...]]):
    r"""This space represent sets of finite-length sequences.

    This space represents the set of tuples of the form :math:`(a_0, \dots, a_n)` where the :math:`a_i` belong
    to some space that is specified during initialization and the integer :math:`n` is not fixed, unless
    ``length`` is given.

    Example:
        >>> from envcore.spaces import Sequence, Box
        >>> observation_space = Sequence(Box(0, 1), seed=0)
        >>> all(element in Box(0, 1) for element in observation_space.sample())
        True
        >>> len(Sequence(Box(0, 1), length=3, seed=0).sample())
        3
    """

    def __init__(
        self,
        space: Space[Any],
        length: int | None = None,
        seed: int | np.random.Generator | None = None,
    ):
        """Constructor of the :class:`Sequence` space.

        Args:
            space: Elements in the sequences this space represent must belong to this space.
            length: If given, every element of this space has exactly this many entries.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.
        """
        if not isinstance(space, Space):
            raise error.SpaceConstructionError(
                f"Expects the feature space to be instance of a envcore Space, actual type: {type(space)}"
            )
        if length is not None and (
            isinstance(length, bool)
            or not isinstance(length, (int, np.integer))
            or length < 0
        ):
            raise error.SpaceConstructionError(
                f"Expects the length to be a non-negative integer, actual value: {length}"
            )
        self.feature_space = space
        self.length = None if length is None else int(length)

        # None for shape and dtype, since it'll require special handling
        super().__init__(None, None, seed)

    def sample(
        self,
        mask: Any | None = None,
        rng: np.random.Generator | None = None,
    ) -> tuple[Any, ...]:
        """Generates a single random sample from this space.

        Without a fixed ``length`` the number of elements is drawn from a geometric distribution with
        ``p = 0.25`` (mean length 4). Every element is drawn from its own substream spawned from the generator.

        Args:
            mask: An optional mask passed to the feature space's :meth:`sample` for every element.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            A tuple of random length with random samples of elements from the :attr:`feature_space`.
        """
        rng = self._rng(rng)
        length = self.length if self.length is not None else int(rng.geometric(0.25))

        return tuple(
            self.feature_space.sample(mask=mask, rng=child)
            for child in seeding.spawn_children(rng, length)
        )

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if isinstance(x, list):
            x = tuple(x)

        return (
            isinstance(x, tuple)
            and (self.length is None or len(x) == self.length)
            and all(self.feature_space.contains(item) for item in x)
        )

    def __repr__(self) -> str:
        """Gives a string representation of this space."""
        if self.length is not None:
            return f"Sequence({self.feature_space}, length={self.length})"
        return f"Sequence({self.feature_space})"

    def __eq__(self, other: Any) -> bool:
        """Check whether ``other`` is equivalent to this instance."""
        return (
            isinstance(other, Sequence)
            and self.feature_space == other.feature_space
            and self.length == other.length
        )
