"""Implementation of a space that consists of binary np.ndarrays of a fixed shape."""
from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from envcore import error
from envcore.spaces.space import Space


class MultiBinary(Space[NDArray[np.int8]]):
    """An n-shape binary space.

    Elements of this space are binary arrays of a shape that is fixed during construction.

    Example:
        >>> from envcore.spaces import MultiBinary
        >>> observation_space = MultiBinary(5, seed=42)
        >>> observation_space.shape
        (5,)
        >>> observation_space = MultiBinary([3, 2], seed=42)
        >>> observation_space.shape
        (3, 2)
    """

    def __init__(
        self,
        n: NDArray[np.integer[Any]] | Sequence[int] | int,
        seed: int | np.random.Generator | None = None,
    ):
        """Constructor of :class:`MultiBinary` space.

        Args:
            n: This will fix the shape of elements of the space. It can either be an integer (if the space is flat)
                or some sort of sequence (tuple, list or np.ndarray) if there are multiple axes.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.
        """
        if isinstance(n, (int, np.integer)) and not isinstance(n, bool):
            self.n = n = int(n)
            input_n = (n,)
        elif isinstance(n, (Sequence, np.ndarray)):
            self.n = input_n = tuple(int(i) for i in n)
        else:
            raise error.SpaceConstructionError(
                f"Expected n to be an int or a sequence of ints, actual type: {type(n)}"
            )
        if not all(dim > 0 for dim in input_n):
            raise error.SpaceConstructionError(
                f"Expected all n to be positive, actual value: {n}"
            )

        super().__init__(input_n, np.int8, seed)

    @property
    def shape(self) -> tuple[int, ...]:
        """Has stricter type than :class:`envcore.Space` - never None."""
        return self._shape  # type: ignore

    def sample(
        self, mask: NDArray[np.int8] | None = None, rng: np.random.Generator | None = None
    ) -> NDArray[np.int8]:
        """Generates a single random sample from this space.

        A sample is drawn by independent, fair coin tosses (one toss per binary variable of the space).

        Args:
            mask: An optional np.ndarray to mask samples with expected shape of ``space.shape``.
                For ``mask == 0`` or ``mask == 1`` the sample takes that value, for ``mask == 2`` it is drawn at random.
                The expected mask shape is the space shape and mask dtype is ``np.int8``.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            Sampled values from space
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
            if mask.shape != self.shape:
                raise ValueError(
                    f"The expected shape of the mask is {self.shape}, actual shape: {mask.shape}"
                )
            if not np.all((mask == 0) | (mask == 1) | (mask == 2)):
                raise ValueError(
                    f"All values of a mask should be 0, 1 or 2, actual values: {mask}"
                )

            return np.where(
                mask == 2,
                rng.integers(low=0, high=2, size=self.n, dtype=self.dtype),
                mask.astype(self.dtype),
            )

        return rng.integers(low=0, high=2, size=self.n, dtype=self.dtype)

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if not isinstance(x, np.ndarray):
            try:
                x = np.asarray(x)
            except (ValueError, TypeError):
                return False

        return bool(
            x.shape == self.shape
            and x.dtype.kind in "biu"
            and np.all((x == 0) | (x == 1))
        )

    def __repr__(self) -> str:
        """Gives a string representation of this space."""
        return f"MultiBinary({self.n})"

    def __eq__(self, other: Any) -> bool:
        """Check whether `other` is equivalent to this instance."""
        return isinstance(other, MultiBinary) and self.n == other.n
