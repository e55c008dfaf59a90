"""Observable client state."""

from .cells import Cell, SessionState

__all__ = [
    'Cell',
    'SessionState',
]
