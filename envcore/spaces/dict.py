"""Implementation of a space that represents the cartesian product of other spaces as a dictionary."""
from __future__ import annotations

import collections.abc
import typing
from typing import Any, KeysView, Sequence

import numpy as np

from envcore import error
from envcore.spaces.space import Space
from envcore.utils import seeding


class Dict(Space[typing.Dict[str, Any]], typing.Mapping[str, Space[Any]]):
    """A dictionary of :class:`Space` instances.

    Elements of this space are dictionaries of elements from the constituent spaces.

    Example:
        >>> from envcore.spaces import Dict, Box, Discrete
        >>> observation_space = Dict({"position": Box(-1, 1, shape=(2,)), "color": Discrete(3)}, seed=42)
        >>> sorted(observation_space.sample())
        ['color', 'position']

        With a nested dict:

        >>> from envcore.spaces import Box, Dict, Discrete, MultiBinary, MultiDiscrete
        >>> Dict(  # doctest: +SKIP
        ...     {
        ...         "ext_controller": MultiDiscrete([5, 2, 2]),
        ...         "inner_state": Dict(
        ...             {
        ...                 "charge": Discrete(100),
        ...                 "system_checks": MultiBinary(10),
        ...                 "job_status": Dict(
        ...                     {
        ...                         "task": Discrete(5),
        ...                         "progress": Box(low=0, high=100, shape=()),
        ...                     }
        ...                 ),
        ...             }
        ...         ),
        ...     }
        ... )

    The subspaces are always kept, sampled and compared in sorted key order, so two spaces built from the same
    mapping in a different insertion order are equal and produce identical samples from identical generators.
    """

    def __init__(
        self,
        spaces: None | dict[str, Space] | Sequence[tuple[str, Space]] = None,
        seed: int | np.random.Generator | None = None,
        **spaces_kwargs: Space,
    ):
        """Constructor of :class:`Dict` space.

        This space can be instantiated in one of two ways: Either you pass a dictionary
        of spaces to :meth:`__init__` via the ``spaces`` argument, or you pass the spaces as separate
        keyword arguments (where you will need to avoid the keys ``spaces`` and ``seed``)

        Args:
            spaces: A dictionary of spaces. This specifies the structure of the :class:`Dict` space
            seed: Optionally, you can use this argument to seed the RNG that is used to sample from the space.
            **spaces_kwargs: If ``spaces`` is ``None``, you need to pass the constituent spaces as keyword arguments, as described above.
        """
        if isinstance(spaces, collections.abc.Mapping):
            spaces = list(spaces.items())
        elif isinstance(spaces, Sequence):
            spaces = list(spaces)
        elif spaces is None:
            spaces = []
        else:
            raise error.SpaceConstructionError(
                f"Unexpected Dict space input, expecting dict or sequence of pairs, actual type: {type(spaces)}"
            )

        for key, space in spaces_kwargs.items():
            spaces.append((key, space))

        keys = [key for key, _ in spaces]
        if len(set(keys)) != len(keys):
            raise error.SpaceConstructionError(
                f"Dict space keys must be unique, actual keys: {keys}"
            )
        try:
            spaces = sorted(spaces, key=lambda item: item[0])
        except TypeError as e:
            raise error.SpaceConstructionError(
                f"Dict space keys must be mutually comparable, actual keys: {keys}"
            ) from e

        self.spaces: dict[str, Space[Any]] = dict(spaces)
        for key, space in self.spaces.items():
            if not isinstance(space, Space):
                raise error.SpaceConstructionError(
                    f"Dict space element is not an instance of Space: key='{key}', space={space}"
                )

        # None for shape and dtype, since it'll require special handling
        super().__init__(None, None, seed)

    def sample(
        self,
        mask: dict[str, Any] | None = None,
        rng: np.random.Generator | None = None,
    ) -> dict[str, Any]:
        """Generates a single random sample from this space.

        The sample is an ordered dictionary of independent samples from the constituent spaces, each drawn from
        its own substream spawned in sorted key order.

        Args:
            mask: An optional mask for each of the subspaces, expects the same keys as the space
            rng: The generator to draw from, defaults to the space's own :attr:`np_random`.

        Returns:
            A dictionary with the same key and sampled values from :attr:`self.spaces`
        """
        children = seeding.spawn_children(self._rng(rng), len(self.spaces))
        if mask is not None:
            if not isinstance(mask, dict):
                raise ValueError(f"Expects mask to be a dict, actual type: {type(mask)}")
            if mask.keys() != self.spaces.keys():
                raise ValueError(
                    f"Expect mask keys to be same as space keys, mask keys: {mask.keys()}, space keys: {self.spaces.keys()}"
                )

            return {
                k: space.sample(mask=mask[k], rng=child)
                for (k, space), child in zip(self.spaces.items(), children)
            }

        return {
            k: space.sample(rng=child)
            for (k, space), child in zip(self.spaces.items(), children)
        }

    def contains(self, x: Any) -> bool:
        """Return boolean specifying if x is a valid member of this space."""
        if isinstance(x, collections.abc.Mapping) and x.keys() == self.spaces.keys():
            return all(x[key] in subspace for key, subspace in self.spaces.items())
        return False

    def __getitem__(self, key: str) -> Space[Any]:
        """Get the space that is associated to `key`."""
        return self.spaces[key]

    def keys(self) -> KeysView:
        """Returns the keys of the Dict."""
        return KeysView(self.spaces)

    def __iter__(self):
        """Iterator through the keys of the subspaces."""
        yield from self.spaces

    def __len__(self) -> int:
        """Gives the number of simpler spaces that make up the `Dict` space."""
        return len(self.spaces)

    def __repr__(self) -> str:
        """Gives a string representation of this space."""
        return (
            "Dict(" + ", ".join([f"{k!r}: {s}" for k, s in self.spaces.items()]) + ")"
        )

    def __eq__(self, other: Any) -> bool:
        """Check whether `other` is equivalent to this instance."""
        return (
            isinstance(other, Dict)
            and self.spaces == other.spaces
        )
