"""
Domain errors raised by the verification store, the ticket renderer and
the email adapter. Services translate them into HTTP responses.
"""


class NexiventError(Exception):
    """Base class for all domain errors."""


class InvalidArgumentError(NexiventError):
    """Malformed or missing required input."""


class CodeNotFoundError(NexiventError):
    """No pending verification code for the identifier."""


class CodeExpiredError(NexiventError):
    """The pending code passed its deadline and has been discarded."""


class CodeMismatchError(NexiventError):
    """The supplied code does not match the pending one. The entry survives."""


class RenderError(NexiventError):
    """The ticket document could not be produced."""


class DeliveryError(NexiventError):
    """The email transport refused or failed to deliver a message."""
