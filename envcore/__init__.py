"""Root `__init__` of the envcore module setting the `__all__` of envcore modules."""

from envcore.core import Env, EpisodeState
from envcore.spaces.space import Space
from envcore import envs, spaces, utils, error, logger

__all__ = [
    # core classes
    "Env",
    "EpisodeState",
    "Space",

    # module folders
    "envs",
    "spaces",
    "utils",
    "error",
    "logger",
]
__version__ = "0.1.0"
