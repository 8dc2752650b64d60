class ResponseBodyError(Exception):
    """Base error for a response body that could not be turned into a result."""

    def __init__(self, message: str, raw_body: str = ""):
        super().__init__(message)
        self.raw_body = raw_body


class MalformedBodyError(ResponseBodyError):
    """The response body is not valid JSON."""


class BodyShapeError(ResponseBodyError):
    """The decoded JSON does not have the expected fields or types."""


class CheckFailedError(ResponseBodyError):
    """A decoded entity failed an invariant assertion (version, visit order, ...)."""
