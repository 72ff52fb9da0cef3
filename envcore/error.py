"""Set of Error classes for envcore."""


class Error(Exception):
    """Error superclass."""


# Spaces and seeding


class SpaceConstructionError(Error, ValueError):
    """Raised when a space is built from malformed parameters, e.g. ``low > high``."""


class InvalidSeed(Error, ValueError):
    """Raised when a seed is not a non-negative integer."""


# Environment protocol


class InvalidAction(Error, ValueError):
    """Raised when an action is not contained in the environment's action space.

    This is a caller-data error: clip or resample the action and call :meth:`Env.step` again.
    """


class StateViolation(Error, RuntimeError):
    """Raised when the reset/step protocol is misused, e.g. stepping before ``reset``
    or after the episode has terminated or truncated.
    """


class ClosedEnvironmentError(StateViolation):
    """Raised when ``reset`` or ``step`` is called on an environment that has been closed."""


class InvalidObservation(Error):
    """Raised when an environment produces an observation outside its observation space."""


class InvalidReward(Error):
    """Raised when an environment produces a reward that is not a finite real number."""


class ResourceError(Error):
    """Raised when an environment fails to acquire or release an underlying resource."""
