"""Error kinds raised by the timeline and capture layers.

None of these are fatal: a failed capture leaves the session usable (retry
``acquire()`` or ``dispose()`` and start again) and navigation errors are
swallowed into no-op moves by ``NavigationState``.
"""

from __future__ import annotations


class LifelineError(Exception):
    """Base class for all lifeline errors."""


class DeviceDenied(LifelineError):
    """The device provider refused or failed to grant a live stream."""


class RecorderStartFailed(LifelineError):
    """A recorder could not be created or started on the acquired stream."""


class InvalidPeriodTransition(LifelineError, ValueError):
    """A period key is malformed or does not fit the requested granularity."""


class UnknownKeyError(LifelineError, ValueError):
    """An emotion or category key is not in the configured table."""
