"""Implementation of a space that represents the cartesian product of other spaces."""
from __future__ import annotations

import typing
from typing import Any, Iterable

import numpy as np

from envcore import error
from envcore.spaces.space import Space
from envcore.utils import seeding


class Tuple(Space[typing.Tuple[Any, ...]], typing.Sequence[Any]):
    """A tuple (more precisely: the cartesian product) of :class:`Space` instances.

    Elements of this space are tuples of elements of the constituent spaces.

    Example:
        >>> from envcore.spaces import Tuple, Box, Discrete
        >>> observation_space = Tuple((Discrete(2), Box(-1, 1, shape=(2,))), seed=42)
        >>> len(observation_space.sample())
        2
    """

    def __init__(
        self,
        spaces: Iterable[Space[Any]],
        seed: int | np.random.Generator | None = None,
    ):
        r"""Constructor of :class:`Tuple` space.

        The generated instance will represent the cartesian product :math:`\text{spaces}[0] \times ... \times \text{spaces}[-1]`.

        Args:
            spaces (Iterable[Space]): The spaces that are involved in the cartesian product.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.
        """
        self.spaces = tuple(spaces)
        for space in self.spaces:
            if not isinstance(space, Space):
                raise error.SpaceConstructionError(
                    f"{space} does not inherit from `envcore.Space`. Actual Type: {type(space)}"
                )
        super().__init__(None, None, seed)

    def sample(
        self,
        mask: tuple[Any | None, ...] | None = None,
        rng: np.random.Generator | None = None,
    ) -> tuple[Any, ...]:
        """Generates a single random sample inside this space.

        Each subspace draws from its own substream spawned from the generator, in order, so the value of
        one element does not depend on how many draws the other subspaces make.

        Args:
            mask: An optional tuple of optional masks for each of the subspace's samples,
                expects the same number of masks as spaces
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            Tuple of the subspace's samples
        """
        children = seeding.spawn_children(self._rng(rng), len(self.spaces))
        if mask is not None:
            if not isinstance(mask, tuple):
                raise ValueError(f"Expected type of mask is tuple, actual type: {type(mask)}")
            if len(mask) != len(self.spaces):
                raise ValueError(
                    f"Expected length of mask is {len(self.spaces)}, actual length: {len(mask)}"
                )

            return tuple(
                space.sample(mask=sub_mask, rng=child)
                for space, sub_mask, child in zip(self.spaces, mask, children)
            )

        return tuple(space.sample(rng=child) for space, child in zip(self.spaces, children))

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if isinstance(x, list):
            x = tuple(x)  # Promote list to tuple for contains check

        return (
            isinstance(x, tuple)
            and len(x) == len(self.spaces)
            and all(space.contains(part) for (space, part) in zip(self.spaces, x))
        )

    def __getitem__(self, index: int) -> Space[Any]:
        """Get the subspace at specific `index`."""
        return self.spaces[index]

    def __len__(self) -> int:
        """Get the number of subspaces that are involved in the cartesian product."""
        return len(self.spaces)

    def __repr__(self) -> str:
        """Gives a string representation of this space."""
        return "Tuple(" + ", ".join([str(s) for s in self.spaces]) + ")"

    def __eq__(self, other: Any) -> bool:
        """Check whether ``other`` is equivalent to this instance."""
        return isinstance(other, Tuple) and self.spaces == other.spaces
