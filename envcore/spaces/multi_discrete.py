"""Implementation of a space that represents the cartesian product of `Discrete` spaces."""
from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from envcore import error
from envcore.spaces.discrete import Discrete
from envcore.spaces.space import Space


class MultiDiscrete(Space[NDArray[np.integer]]):
    """This represents the cartesian product of arbitrary :class:`Discrete` spaces.

    It is useful to represent game controllers or keyboards where each key can be represented as a discrete action space.

    Note:
        Some environment wrappers assume a value of 0 always represents the NOOP action.

    e.g. Nintendo Game Controller - Can be conceptualized as 3 discrete action spaces:

    1. Arrow Keys: Discrete 5  - NOOP[0], UP[1], RIGHT[2], DOWN[3], LEFT[4]  - params: min: 0, max: 4
    2. Button A:   Discrete 2  - NOOP[0], Pressed[1] - params: min: 0, max: 1
    3. Button B:   Discrete 2  - NOOP[0], Pressed[1] - params: min: 0, max: 1

    It can be initialized as ``MultiDiscrete([ 5, 2, 2 ])`` such that a sample might be ``array([3, 1, 0])``.

    Although this feature is rarely used, :class:`MultiDiscrete` spaces may also have several axes
    if ``nvec`` has several axes:

    Example:
        >>> from envcore.spaces import MultiDiscrete
        >>> import numpy as np
        >>> observation_space = MultiDiscrete(np.array([[1, 2], [3, 4]]), seed=42)
        >>> observation_space.shape
        (2, 2)
    """

    def __init__(
        self,
        nvec: NDArray[np.integer[Any]] | list[int],
        dtype: str | type[np.integer[Any]] = np.int64,
        seed: int | np.random.Generator | None = None,
        start: NDArray[np.integer[Any]] | list[int] | None = None,
    ):
        """Constructor of :class:`MultiDiscrete` space.

        The argument ``nvec`` will determine the number of values each categorical variable can take. If
        ``start`` is provided, it will define the minimal values corresponding to each categorical variable.

        Args:
            nvec: vector of counts of each categorical variable. This will usually be a list of integers. However,
                you may also pass a more complicated numpy array if you'd like the space to have several axes.
            dtype: This should be some kind of integer type.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.
            start: Optionally, the starting value the element of each class will take (defaults to 0).
        """
        self.dtype = np.dtype(dtype)
        if not np.issubdtype(self.dtype, np.integer):
            raise error.SpaceConstructionError(
                f"Expected MultiDiscrete dtype to be an integer dtype, actual dtype: {self.dtype}"
            )

        nvec = np.array(nvec, copy=True)
        if not np.issubdtype(nvec.dtype, np.integer):
            raise error.SpaceConstructionError(
                f"Expected `nvec` to contain integers, actual dtype: {nvec.dtype}"
            )
        if not np.all(nvec > 0):
            raise error.SpaceConstructionError(
                f"Expected all `nvec` values to be positive, actual: {nvec}"
            )

        start = np.zeros(nvec.shape, dtype=np.int64) if start is None else np.array(start)
        if start.shape != nvec.shape:
            raise error.SpaceConstructionError(
                f"Expected `start` and `nvec` to have the same shape, actual: {start.shape} and {nvec.shape}"
            )
        if not np.issubdtype(start.dtype, np.integer):
            raise error.SpaceConstructionError(
                f"Expected `start` to contain integers, actual dtype: {start.dtype}"
            )

        # every element, start through start + nvec - 1, must be representable in dtype
        dtype_info = np.iinfo(self.dtype)
        first = start.astype(object)
        last = first + nvec.astype(object) - 1
        if (
            np.any(nvec.astype(object) > dtype_info.max)
            or np.any(first < dtype_info.min)
            or np.any(last > dtype_info.max)
        ):
            raise error.SpaceConstructionError(
                f"Expected all MultiDiscrete elements to fit {self.dtype}, actual nvec: {nvec}, start: {start}"
            )
        self.nvec = nvec.astype(self.dtype)
        self.start = start.astype(self.dtype)

        self.nvec.flags.writeable = False
        self.start.flags.writeable = False

        super().__init__(self.nvec.shape, self.dtype, seed)

    @property
    def shape(self) -> tuple[int, ...]:
        """Has stricter type than :class:`envcore.Space` - never None."""
        return self._shape  # type: ignore

    def sample(
        self,
        mask: tuple[Any, ...] | None = None,
        rng: np.random.Generator | None = None,
    ) -> NDArray[np.integer[Any]]:
        """Generates a single random sample from this space.

        Args:
            mask: An optional mask for multi-discrete, expects tuples with a `np.ndarray` mask in the position of each
                action with shape `(n,)` where `n` is the number of actions and `dtype=np.int8`.
                Only mask values == 1 are possible to sample unless all mask values for an action are 0 then the default action `self.start` (the smallest element) is sampled.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            An `np.ndarray` of shape `space.shape`
        """
        rng = self._rng(rng)
        if mask is not None:

            def _apply_mask(
                sub_mask: tuple[Any, ...] | NDArray[np.int8],
                sub_nvec: NDArray[np.integer[Any]] | np.integer[Any],
                sub_start: NDArray[np.integer[Any]] | np.integer[Any],
            ) -> np.integer[Any] | list[Any]:
                if isinstance(sub_nvec, np.ndarray):
                    if not isinstance(sub_mask, tuple) or len(sub_mask) != len(sub_nvec):
                        raise ValueError(
                            f"Expects the mask to be a tuple of length {len(sub_nvec)}, actual value: {sub_mask}"
                        )
                    return [
                        _apply_mask(new_mask, new_nvec, new_start)
                        for new_mask, new_nvec, new_start in zip(sub_mask, sub_nvec, sub_start)
                    ]
                return Discrete(int(sub_nvec), start=int(sub_start)).sample(sub_mask, rng=rng)

            return np.array(_apply_mask(mask, self.nvec, self.start), dtype=self.dtype)

        return rng.integers(
            self.start, self.start + (self.nvec - 1), endpoint=True, dtype=self.dtype
        )

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if not isinstance(x, np.ndarray):
            try:
                x = np.asarray(x)
            except (ValueError, TypeError):
                return False

        if not (x.shape == self.shape and x.dtype.kind in "iu"):
            return False
        # compare as python ints, mixed or narrow integer dtypes could wrap
        values = x.astype(object)
        start = self.start.astype(object)
        return bool(
            np.all(start <= values)
            and np.all(values < start + self.nvec.astype(object))
        )

    def __len__(self):
        """Gives the ``len`` of samples from `MultiDiscrete`."""
        return len(self.nvec)

    def __repr__(self):
        """Gives a string representation of this space."""
        if np.any(self.start != 0):
            return f"MultiDiscrete({self.nvec}, start={self.start})"
        return f"MultiDiscrete({self.nvec})"

    def __eq__(self, other: Any) -> bool:
        """Check whether ``other`` is equivalent to this instance."""
        return bool(
            isinstance(other, MultiDiscrete)
            and self.dtype == other.dtype
            and self.shape == other.shape
            and np.all(self.nvec == other.nvec)
            and np.all(self.start == other.start)
        )
