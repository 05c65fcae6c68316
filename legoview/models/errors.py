"""Error taxonomy for the view-state engine.

None of these are fatal: the record store and controller catch them, log them
and fall back to an empty or previously valid state.
"""

from legoview.models.data_models import ErrorKind


class LegoViewError(Exception):
    """Base class for recoverable view errors."""
    kind: ErrorKind


class AcquisitionFailure(LegoViewError):
    """Network, HTTP or decoding failure while fetching a batch."""
    kind = ErrorKind.ACQUISITION_FAILURE


class MalformedBatch(LegoViewError):
    """Acquisition response that does not have the expected structure."""
    kind = ErrorKind.MALFORMED_BATCH


class InvalidEventPayload(LegoViewError):
    """Event carried a value the controller cannot use."""
    kind = ErrorKind.INVALID_EVENT_PAYLOAD
