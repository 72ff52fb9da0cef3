"""Implementation of a space that represents closed boxes in euclidean space."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, SupportsFloat

import numpy as np
from numpy.typing import NDArray

from envcore import error, logger
from envcore.spaces.space import Space


def array_short_repr(arr: NDArray[Any]) -> str:
    """Create a shortened string representation of a numpy array.

    If arr is a multiple of the all-ones vector, the same number will be printed
    Otherwise, the string representation of the full array is returned.

    Args:
        arr: The array to represent

    Returns:
        A short representation of the array
    """
    if arr.size != 0 and np.min(arr) == np.max(arr):
        return str(np.min(arr))
    return str(arr)


def is_float_integer(var: Any) -> bool:
    """Checks if a scalar variable is an integer or float (does not include bool)."""
    return np.issubdtype(type(var), np.integer) or np.issubdtype(type(var), np.floating)


class Box(Space[NDArray[Any]]):
    r"""A (possibly unbounded) box in :math:`\mathbb{R}^n`.

    Specifically, a Box represents the Cartesian product of n closed intervals.
    Each interval has the form of one of :math:`[a, b]`, :math:`(-\infty, b]`,
    :math:`[a, \infty)`, or :math:`(-\infty, \infty)`.

    There are two common use cases:

    * Identical bound for each dimension::

        >>> Box(low=-1.0, high=2.0, shape=(3, 4), dtype=np.float32)
        Box(-1.0, 2.0, (3, 4), float32)

    * Independent bound for each dimension::

        >>> Box(low=np.array([-1.0, -2.0]), high=np.array([2.0, 4.0]), dtype=np.float32)
        Box([-1. -2.], [2. 4.], (2,), float32)
    """

    def __init__(
        self,
        low: SupportsFloat | NDArray[Any],
        high: SupportsFloat | NDArray[Any],
        shape: Sequence[int] | None = None,
        dtype: type[np.floating[Any]] | type[np.integer[Any]] = np.float32,
        seed: int | np.random.Generator | None = None,
    ):
        r"""Constructor of :class:`Box`.

        The argument ``low`` specifies the lower bound of each dimension and ``high`` specifies the upper bounds.
        I.e., the space that is constructed will be the product of the intervals :math:`[\text{low}[i], \text{high}[i]]`.

        If ``low`` (or ``high``) is a scalar, the lower bound (or upper bound, respectively) will be assumed to be
        this value across all dimensions.

        Args:
            low (SupportsFloat | np.ndarray): Lower bounds of the intervals. If integer, must be at least ``-2**63``.
            high (SupportsFloat | np.ndarray]): Upper bounds of the intervals. If integer, must be at most ``2**63 - 2``.
            shape (Optional[Sequence[int]]): The shape is inferred from the shape of `low` or `high` `np.ndarray`s with
                `low` and `high` scalars defaulting to a shape of (1,)
            dtype: The dtype of the elements of the space. If this is an integer type, the :class:`Box` is essentially a discrete space.
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.

        Raises:
            SpaceConstructionError: If no shape information is provided (shape is None, low is None and high is None),
                the bounds do not match the shape, or ``low > high`` in some dimension.
        """
        if dtype is None:
            raise error.SpaceConstructionError("Box dtype must be explicitly provided, cannot be None.")
        self.dtype = np.dtype(dtype)

        # Only integer and floating point dtypes describe intervals
        if not (
            np.issubdtype(self.dtype, np.integer)
            or np.issubdtype(self.dtype, np.floating)
        ):
            raise error.SpaceConstructionError(
                f"Invalid Box dtype ({self.dtype}), must be an integer or floating-point dtype"
            )

        if isinstance(low, (list, tuple)):
            low = np.asarray(low)
        if isinstance(high, (list, tuple)):
            high = np.asarray(high)

        # determine shape
        if shape is not None:
            if not isinstance(shape, Iterable):
                raise error.SpaceConstructionError(
                    f"Expected Box shape to be an iterable, actual type={type(shape)}"
                )
            elif not all(np.issubdtype(type(dim), np.integer) for dim in shape):
                raise error.SpaceConstructionError(
                    f"Expected all Box shape elements to be integer, actual type={tuple(type(dim) for dim in shape)}"
                )
            elif any(dim < 0 for dim in shape):
                raise error.SpaceConstructionError(
                    f"Expected all Box shape elements to be non-negative, actual shape={shape}"
                )
            shape = tuple(int(dim) for dim in shape)
        elif isinstance(low, np.ndarray) and isinstance(high, np.ndarray):
            if low.shape != high.shape:
                raise error.SpaceConstructionError(
                    f"Box low.shape and high.shape don't match, low.shape={low.shape}, high.shape={high.shape}"
                )
            shape = low.shape
        elif isinstance(low, np.ndarray):
            shape = low.shape
        elif isinstance(high, np.ndarray):
            shape = high.shape
        elif is_float_integer(low) and is_float_integer(high):
            shape = (1,)
        else:
            raise error.SpaceConstructionError(
                f"Box shape is not specified, therefore inferred from low and high. Expected low and high to be np.ndarray, integer, or float. Actual types low={type(low)}, high={type(high)}"
            )
        self._shape: tuple[int, ...] = shape

        # Cast scalar values to `np.ndarray` and capture the boundedness information
        # disallowed cases
        # * out of range - this must be done before casting to low and high otherwise, the value is within dtype and cannot be out of range
        # * nan - must be done beforehand as int dtype can cast `nan` to another value
        # * unsign int inf and -inf - special case that is disallowed

        self.low, self.bounded_below = self._cast_low(low)
        self.high, self.bounded_above = self._cast_high(high)

        # recheck shape for case where shape and (low or high) are provided
        if self.low.shape != shape:
            raise error.SpaceConstructionError(
                f"Box low.shape doesn't match provided shape, low.shape={self.low.shape}, shape={self.shape}"
            )
        if self.high.shape != shape:
            raise error.SpaceConstructionError(
                f"Box high.shape doesn't match provided shape, high.shape={self.high.shape}, shape={self.shape}"
            )

        # check that low <= high
        if np.any(self.low > self.high):
            raise error.SpaceConstructionError(
                f"Box all low values must be less than or equal to high (some values break this), low={self.low}, high={self.high}"
            )

        # shapes and bounds are fixed once the space exists
        for arr in (self.low, self.high, self.bounded_below, self.bounded_above):
            arr.flags.writeable = False

        self.low_repr = array_short_repr(self.low)
        self.high_repr = array_short_repr(self.high)

        super().__init__(self.shape, self.dtype, seed)

    def _cast_low(self, low) -> tuple[np.ndarray, np.ndarray]:
        """Casts the input Box low value to ndarray with provided dtype.

        Args:
            low: The input box low value

        Returns:
            The updated low value and for what values the input is bounded (below)
        """
        if is_float_integer(low):
            bounded_below = -np.inf < np.full(self.shape, low, dtype=float)

            if np.isnan(low):
                raise error.SpaceConstructionError(f"No low value can be equal to `np.nan`, low={low}")
            elif np.isneginf(low):
                if self.dtype.kind == "i":  # signed int
                    low = np.iinfo(self.dtype).min
                elif self.dtype.kind == "u":  # unsigned int
                    raise error.SpaceConstructionError(
                        f"Box unsigned int dtype don't support `-np.inf`, low={low}"
                    )
            self._check_integer_range(low, "low")

            return np.full(self.shape, low, dtype=self.dtype), bounded_below
        else:
            if not isinstance(low, np.ndarray):
                raise error.SpaceConstructionError(
                    f"Box low must be a np.ndarray, integer, or float, actual type={type(low)}"
                )
            elif not (
                np.issubdtype(low.dtype, np.floating)
                or np.issubdtype(low.dtype, np.integer)
                or low.dtype == np.bool_
            ):
                raise error.SpaceConstructionError(
                    f"Box low must be a floating, integer, or bool dtype, actual dtype={low.dtype}"
                )
            elif np.any(np.isnan(low)):
                raise error.SpaceConstructionError(f"No low value can be equal to `np.nan`, low={low}")

            bounded_below = -np.inf < low

            neginf = np.isneginf(low)
            if np.any(neginf) and self.dtype.kind == "u":  # unsigned int
                raise error.SpaceConstructionError(
                    f"Box minimum low value is `-np.inf`, only supported by signed int and floats, low={low}"
                )
            if self.dtype.kind == "i":  # signed int
                finite_low = np.where(neginf, 0, low)
                self._check_integer_range(finite_low, "low")
                cast_low = finite_low.astype(self.dtype)
                cast_low[neginf] = np.iinfo(self.dtype).min
                return cast_low, bounded_below
            self._check_integer_range(low, "low")

            if (
                np.issubdtype(low.dtype, np.floating)
                and np.issubdtype(self.dtype, np.floating)
                and np.finfo(self.dtype).precision < np.finfo(low.dtype).precision
            ):
                logger.warn(
                    f"Box low's precision lowered by casting to {self.dtype}, current low.dtype={low.dtype}"
                )
            return low.astype(self.dtype), bounded_below

    def _cast_high(self, high) -> tuple[np.ndarray, np.ndarray]:
        """Casts the input Box high value to ndarray with provided dtype.

        Args:
            high: The input box high value

        Returns:
            The updated high value and for what values the input is bounded (above)
        """
        if is_float_integer(high):
            bounded_above = np.full(self.shape, high, dtype=float) < np.inf

            if np.isnan(high):
                raise error.SpaceConstructionError(f"No high value can be equal to `np.nan`, high={high}")
            elif np.isposinf(high):
                if self.dtype.kind == "i":  # signed int
                    high = np.iinfo(self.dtype).max
                elif self.dtype.kind == "u":  # unsigned int
                    high = np.iinfo(self.dtype).max
            self._check_integer_range(high, "high")

            return np.full(self.shape, high, dtype=self.dtype), bounded_above
        else:
            if not isinstance(high, np.ndarray):
                raise error.SpaceConstructionError(
                    f"Box high must be a np.ndarray, integer, or float, actual type={type(high)}"
                )
            elif not (
                np.issubdtype(high.dtype, np.floating)
                or np.issubdtype(high.dtype, np.integer)
                or high.dtype == np.bool_
            ):
                raise error.SpaceConstructionError(
                    f"Box high must be a floating or integer dtype, actual dtype={high.dtype}"
                )
            elif np.any(np.isnan(high)):
                raise error.SpaceConstructionError(f"No high value can be equal to `np.nan`, high={high}")

            bounded_above = high < np.inf

            if self.dtype.kind in {"i", "u"}:  # signed and unsigned int
                posinf = np.isposinf(high)
                finite_high = np.where(posinf, 0, high)
                self._check_integer_range(finite_high, "high")
                cast_high = finite_high.astype(self.dtype)
                cast_high[posinf] = np.iinfo(self.dtype).max
                return cast_high, bounded_above

            if (
                np.issubdtype(high.dtype, np.floating)
                and np.issubdtype(self.dtype, np.floating)
                and np.finfo(self.dtype).precision < np.finfo(high.dtype).precision
            ):
                logger.warn(
                    f"Box high's precision lowered by casting to {self.dtype}, current high.dtype={high.dtype}"
                )
            return high.astype(self.dtype), bounded_above

    def _check_integer_range(self, value, name: str):
        if self.dtype.kind not in {"i", "u"}:
            return
        dtype_info = np.iinfo(self.dtype)
        value = np.asarray(value)
        if np.any(value < dtype_info.min) or np.any(value > dtype_info.max):
            raise error.SpaceConstructionError(
                f"Box {name} is out of bounds of the dtype range, {name}={value}, dtype={self.dtype}"
            )

    @property
    def shape(self) -> tuple[int, ...]:
        """Has stricter type than :class:`Space` - always returns a tuple."""
        return self._shape

    def is_bounded(self, manner: str = "both") -> bool:
        """Checks whether the box is bounded in some sense.

        Args:
            manner (str): One of ``"both"``, ``"below"``, ``"above"``.

        Returns:
            If the space is bounded

        Raises:
            ValueError: If `manner` is neither ``"both"`` nor ``"below"`` or ``"above"``
        """
        below = bool(np.all(self.bounded_below))
        above = bool(np.all(self.bounded_above))
        if manner == "both":
            return below and above
        elif manner == "below":
            return below
        elif manner == "above":
            return above
        else:
            raise ValueError(
                f"manner is not in {{'below', 'above', 'both'}}, actual value: {manner}"
            )

    def sample(
        self, mask: None = None, rng: np.random.Generator | None = None
    ) -> NDArray[Any]:
        r"""Generates a single random sample inside the Box.

        In creating a sample of the box, each coordinate is sampled (independently) from a distribution
        that is chosen according to the form of the interval:

        * :math:`[a, b]` : uniform distribution
        * :math:`[a, \infty)` : shifted exponential distribution, ``a + Exp(1)``
        * :math:`(-\infty, b]` : shifted negative exponential distribution, ``b - Exp(1)``
        * :math:`(-\infty, \infty)` : standard normal distribution

        For integer dtypes a bounded coordinate is drawn uniformly from the integers in :math:`[a, b]`, and the
        other forms add a floored draw to the finite bound, clipped to the dtype range. The arithmetic is exact,
        so samples stay inside the box however large the bounds.

        Args:
            mask: A mask for sampling values from the Box space, currently unsupported.
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            A sampled value from the Box
        """
        if mask is not None:
            raise ValueError(
                f"Box.sample cannot be provided a mask, actual value: {mask}"
            )
        rng = self._rng(rng)

        # Masking arrays which classify the coordinates according to interval type
        unbounded = ~self.bounded_below & ~self.bounded_above
        upp_bounded = ~self.bounded_below & self.bounded_above
        low_bounded = self.bounded_below & ~self.bounded_above
        bounded = self.bounded_below & self.bounded_above

        if self.dtype.kind in {"i", "u"}:
            return self._sample_integer(rng, unbounded, upp_bounded, low_bounded, bounded)

        sample = np.empty(self.shape)

        # Vectorized sampling by interval type
        sample[unbounded] = rng.normal(size=unbounded[unbounded].shape)

        sample[low_bounded] = (
            rng.exponential(size=low_bounded[low_bounded].shape)
            + self.low[low_bounded]
        )

        sample[upp_bounded] = (
            -rng.exponential(size=upp_bounded[upp_bounded].shape)
            + self.high[upp_bounded]
        )

        sample[bounded] = rng.uniform(
            low=self.low[bounded], high=self.high[bounded], size=bounded[bounded].shape
        )

        return sample.astype(self.dtype)

    def _sample_integer(self, rng, unbounded, upp_bounded, low_bounded, bounded) -> NDArray[Any]:
        sample = np.empty(self.shape, dtype=self.dtype)

        offsets = np.zeros(self.shape, dtype=np.int64)
        offsets[unbounded] = np.floor(rng.normal(size=unbounded[unbounded].shape))
        offsets[low_bounded] = np.floor(rng.exponential(size=low_bounded[low_bounded].shape))
        offsets[upp_bounded] = -np.floor(rng.exponential(size=upp_bounded[upp_bounded].shape))

        # python ints, so the bound plus offset cannot wrap around
        base = np.where(low_bounded, self.low, np.where(upp_bounded, self.high, 0)).astype(object)
        values = base + offsets.astype(object)
        values = np.minimum(np.maximum(values, self.low.astype(object)), self.high.astype(object))
        sample[~bounded] = values[~bounded]

        if np.any(bounded):
            sample[bounded] = rng.integers(
                self.low[bounded], self.high[bounded], endpoint=True, dtype=self.dtype
            )
        return sample

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space.

        ``x`` must have the space's shape, a dtype of a compatible kind (float boxes accept bool, integer and
        float data, integer boxes accept bool and integer data) and lie within ``[low, high]``.
        """
        if not isinstance(x, np.ndarray):
            try:
                x = np.asarray(x)
            except (ValueError, TypeError):
                return False

        if x.dtype.kind not in _COMPATIBLE_KINDS[self.dtype.kind]:
            return False
        if x.shape != self.shape:
            return False
        with np.errstate(invalid="ignore"):
            return bool(np.all(x >= self.low) and np.all(x <= self.high))

    def __repr__(self) -> str:
        """A string representation of this space.

        The representation will include bounds, shape and dtype.
        If a bound is uniform, only the corresponding scalar will be given to avoid redundant and ugly strings.

        Returns:
            A representation of the space
        """
        return f"Box({self.low_repr}, {self.high_repr}, {self.shape}, {self.dtype})"

    def __eq__(self, other: Any) -> bool:
        """Check whether `other` is equivalent to this instance. Doesn't check dtype equivalence."""
        return (
            isinstance(other, Box)
            and (self.shape == other.shape)
            and (self.dtype == other.dtype)
            and np.allclose(self.low, other.low)
            and np.allclose(self.high, other.high)
        )


_COMPATIBLE_KINDS: Mapping[str, str] = {"f": "biuf", "i": "biu", "u": "biu"}
