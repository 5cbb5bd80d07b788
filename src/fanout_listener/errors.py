"""Exception hierarchy for the fan-out listener."""


class FanoutListenerError(Exception):
    """Base error for the fan-out listener."""


class ResolutionError(FanoutListenerError):
    """Queue name could not be resolved to a queue URL."""

    def __init__(self, queue_name: str, message: str | None = None):
        self.queue_name = queue_name
        super().__init__(message or f"Unable to resolve queue {queue_name!r}")


class QueueNotFoundError(ResolutionError):
    """No queue matches the requested name."""

    def __init__(self, queue_name: str):
        super().__init__(queue_name, f"Unable to find queue {queue_name!r}")


class TransportError(FanoutListenerError):
    """An SQS call failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class MalformedCounterError(FanoutListenerError):
    """The Nodes attribute is not a positive integer."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Nodes value {value!r} is not a positive integer")
