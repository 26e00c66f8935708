class ZanaError(Exception):
    """Base class for errors surfaced to callers of the engine."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(ZanaError):
    """Content is blank; rejected before any analyzer runs."""

    status_code = 400


class QuotaExceeded(ZanaError):
    status_code = 402


class RemoteAnalysisFailure(ZanaError):
    """The semantic analyzer failed (network, timeout, rate limit or malformed response)."""

    status_code = 502


class RemoteFixFailure(ZanaError):
    status_code = 502


class ResultNotFound(ZanaError):
    status_code = 404
