"""
Query profiler for the database manager

Records the span of every statement issued through a DatabaseManager.
Entries are addressed by the integer handle returned from open(); the
handle is the entry's position in creation order.
"""

import time
import threading
import logging
from typing import Any, Callable, List, Optional
from dataclasses import dataclass

from .errors import UnknownHandleError

logger = logging.getLogger(__name__)


@dataclass
class ProfileEntry:
    """A single recorded operation."""
    label: str
    parameters: Any
    started_at: float
    ended_at: Optional[float] = None


@dataclass(frozen=True)
class ProfileSnapshot:
    """Read-only view of a profile entry."""
    label: str
    parameters: Any
    started_at: float
    ended_at: Optional[float]
    duration: Optional[float]

    @classmethod
    def from_entry(cls, entry: ProfileEntry) -> 'ProfileSnapshot':
        duration = None
        if entry.ended_at is not None:
            duration = entry.ended_at - entry.started_at
        return cls(
            label=entry.label,
            parameters=entry.parameters,
            started_at=entry.started_at,
            ended_at=entry.ended_at,
            duration=duration
        )

    @property
    def completed(self) -> bool:
        return self.ended_at is not None


class QueryProfiler:
    """Thread-safe store of query timings."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        """
        Initialize profiler

        Args:
            clock: Monotonic time source, in seconds
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: List[ProfileEntry] = []

    def open(self, label: str, parameters: Any = None) -> int:
        """
        Start timing an operation

        Args:
            label: SQL text or operation tag
            parameters: Bound parameters, stored as given

        Returns:
            Handle of the new entry
        """
        with self._lock:
            self._entries.append(ProfileEntry(label, parameters, self._clock()))
            return len(self._entries) - 1

    def close(self, handle: int) -> None:
        """
        Stop timing an operation

        Args:
            handle: Handle returned by open()

        Raises:
            UnknownHandleError: If the handle does not belong to a live entry
        """
        with self._lock:
            entry = self._lookup(handle)
            if entry.ended_at is not None:
                logger.debug(f"Profile {handle} closed again, overwriting end time")
            entry.ended_at = self._clock()

    def get_entry(self, handle: int) -> ProfileSnapshot:
        """
        Get timing for one operation

        Args:
            handle: Handle returned by open()

        Returns:
            Snapshot of the entry; duration is None while it is still open

        Raises:
            UnknownHandleError: If the handle does not belong to a live entry
        """
        with self._lock:
            return ProfileSnapshot.from_entry(self._lookup(handle))

    def get_all_completed(self) -> List[ProfileSnapshot]:
        """Get snapshots of all closed entries in creation order."""
        with self._lock:
            return [ProfileSnapshot.from_entry(entry)
                    for entry in self._entries
                    if entry.ended_at is not None]

    def clear(self) -> None:
        """Discard all entries. Handles restart at 0."""
        with self._lock:
            self._entries = []

    def total_time(self) -> float:
        """Sum of durations of all closed entries."""
        return sum(profile.duration for profile in self.get_all_completed())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _lookup(self, handle: Any) -> ProfileEntry:
        # bool is an int subclass but never a valid handle
        if (not isinstance(handle, int) or isinstance(handle, bool)
                or not 0 <= handle < len(self._entries)):
            raise UnknownHandleError(handle)
        return self._entries[handle]
