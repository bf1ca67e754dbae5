"""Exception types raised by the metrics engine."""


class LabPulseError(Exception):
    """Base class for all engine errors."""


class InvalidRange(LabPulseError, ValueError):
    """A period is out of range, or a window starts after it ends."""


class InvalidMetric(LabPulseError, ValueError):
    """A metric argument is malformed (programmatic misuse, not user input)."""


class StoreError(LabPulseError):
    """The underlying store failed to read or write."""
