"""election_engine package - voter registration and ballot tallying

A single election cycle: candidates, a voting window, one ballot per
registered voter and a tie-inclusive winner declaration at finalization.
"""

from .election import Election, ElectionEvent
from .errors import ElectionError
from .stats import Gender, GenderStats
from .window import WindowState

__all__ = [
    "Election",
    "ElectionError",
    "ElectionEvent",
    "Gender",
    "GenderStats",
    "WindowState",
]
