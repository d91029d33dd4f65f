"""
Exceptions raised by the engine.

Rejected operations are not errors; the gate reports them as False.
"""


class DesyncError(RuntimeError):
    """Local state disagrees with what the judge reported."""


class ProtocolError(ValueError):
    """Malformed or truncated judge input."""


class EndOfInput(ProtocolError):
    """The judge closed the stream."""
