"""
Engine error types.

Fatal errors (NotFound, ProtocolViolation) mean the snapshot and our model
have drifted apart and no safe action can be produced; they propagate to
the top of the turn. NoSafeSiteAvailable is recoverable and callers are
expected to fall back to a rally point or WAIT.
"""


class ArenaError(RuntimeError):
    """Base class for arena engine failures."""


class NotFound(ArenaError, KeyError):
    """Raised when a site or unit id is referenced but not registered."""


class NoSafeSiteAvailable(ArenaError):
    """Raised when no unowned site lies outside every enemy tower's range."""


class ProtocolViolation(ArenaError):
    """Raised when turn input contradicts what the engine has tracked."""


class StructureMismatch(ArenaError, ValueError):
    """Raised when a structure view is requested for the wrong structure kind."""
