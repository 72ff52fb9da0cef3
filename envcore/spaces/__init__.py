"""This module implements various spaces.

Spaces describe mathematical sets and are used to specify valid actions and observations.
Every environment must have the attributes ``action_space`` and ``observation_space``.
If, for instance, three possible actions (0,1,2) can be performed in your environment and observations
are vectors in the two-dimensional unit cube, the environment code may contain the following two lines::

    self.action_space = spaces.Discrete(3)
    self.observation_space = spaces.Box(0, 1, shape=(2,))

All spaces inherit from the :class:`Space` superclass.
"""

from envcore.spaces.box import Box
from envcore.spaces.dict import Dict
from envcore.spaces.discrete import Discrete
from envcore.spaces.multi_binary import MultiBinary
from envcore.spaces.multi_discrete import MultiDiscrete
from envcore.spaces.sequence import Sequence
from envcore.spaces.space import Space
from envcore.spaces.tuple import Tuple

__all__ = [
    # base space
    "Space",

    # fundamental spaces
    "Box",
    "Discrete",
    "MultiDiscrete",
    "MultiBinary",

    # composite spaces
    "Tuple",
    "Dict",
    "Sequence",
]
