"""Implementation of a space consisting of finitely many elements."""
from __future__ import annotations

from typing import Any

import numpy as np

from envcore import error
from envcore.spaces.space import Space


class Discrete(Space[np.int64]):
    r"""A space consisting of finitely many elements.

    This class represents a finite subset of integers, more specifically a set of the form :math:`\{ a, a+1, \dots, a+n-1 \}`.

    Example:
        >>> from envcore.spaces import Discrete
        >>> observation_space = Discrete(2, seed=42) # {0, 1}
        >>> 0 in observation_space
        True
        >>> observation_space = Discrete(3, start=-1, seed=42)  # {-1, 0, 1}
        >>> observation_space.contains(3)
        False
    """

    def __init__(
        self,
        n: int | np.integer[Any],
        seed: int | np.random.Generator | None = None,
        start: int | np.integer[Any] = 0,
    ):
        r"""Constructor of :class:`Discrete` space.

        This will construct the space :math:`\{\text{start}, ..., \text{start} + n - 1\}`.

        Args:
            n (int): The number of elements of this space.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the ``Discrete`` space.
            start (int): The smallest element of this space.
        """
        if not _is_integer(n):
            raise error.SpaceConstructionError(
                f"Expects `n` to be an integer, actual dtype: {type(n)}"
            )
        if n <= 0:
            raise error.SpaceConstructionError(f"Expects `n` to be positive, actual: {n}")
        if not _is_integer(start):
            raise error.SpaceConstructionError(
                f"Expects `start` to be an integer, actual type: {type(start)}"
            )

        self.n = np.int64(n)
        self.start = np.int64(start)
        super().__init__((), np.int64, seed)

    def sample(
        self, mask: np.ndarray | None = None, rng: np.random.Generator | None = None
    ) -> np.int64:
        """Generates a single random sample from this space.

        A sample will be chosen uniformly at random with the mask if provided

        Args:
            mask: An optional mask for if an action can be selected.
                Expected `np.ndarray` of shape ``(n,)`` and dtype ``np.int8`` where ``1`` represents valid actions and ``0`` invalid / infeasible actions.
                If there are no possible actions (i.e. ``np.all(mask == 0)``) then ``space.start`` will be returned.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            A sampled integer from the space
        """
        rng = self._rng(rng)
        if mask is not None:
            if not isinstance(mask, np.ndarray):
                raise ValueError(
                    f"The expected type of the mask is np.ndarray, actual type: {type(mask)}"
                )
            if mask.dtype != np.int8:
                raise ValueError(
                    f"The expected dtype of the mask is np.int8, actual dtype: {mask.dtype}"
                )
            if mask.shape != (self.n,):
                raise ValueError(
                    f"The expected shape of the mask is {(int(self.n),)}, actual shape: {mask.shape}"
                )
            valid_action_mask = mask == 1
            if not np.all(np.logical_or(mask == 0, valid_action_mask)):
                raise ValueError(
                    f"All values of a mask should be 0 or 1, actual values: {mask}"
                )
            if np.any(valid_action_mask):
                return self.start + rng.choice(np.where(valid_action_mask)[0])
            else:
                return self.start

        return self.start + rng.integers(self.n)

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if _is_integer(x):
            as_int = int(x)
        elif isinstance(x, np.ndarray) and x.shape == () and x.dtype.kind in "iu":
            as_int = int(x.item())
        else:
            return False

        start = int(self.start)
        return start <= as_int < start + int(self.n)

    def __repr__(self) -> str:
        """Gives a string representation of this space."""
        if self.start != 0:
            return f"Discrete({self.n}, start={self.start})"
        return f"Discrete({self.n})"

    def __eq__(self, other: Any) -> bool:
        """Check whether ``other`` is equivalent to this instance."""
        return (
            isinstance(other, Discrete)
            and self.n == other.n
            and self.start == other.start
        )


def _is_integer(x: Any) -> bool:
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
