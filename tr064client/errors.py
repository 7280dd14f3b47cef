from enum import Enum


class ErrorKind(Enum):
    """
    Outcome of a failed protocol operation. Operations return one of these
    next to their result instead of raising.
    """

    UNKNOWN_SERVICE = "unknown_service"
    TRANSPORT_FAILURE = "transport_failure"
    MISSING_RESULT_FIELD = "missing_result_field"
    MALFORMED_RESPONSE = "malformed_response"


class TR064Error(Exception):
    """
    Exception class for TR-064 errors.
    """

    kind = None


class UnknownServiceError(TR064Error):
    """
    The router doesn't offer the requested service.
    """

    kind = ErrorKind.UNKNOWN_SERVICE


class TransportError(TR064Error):
    """
    The HTTP request failed or returned a non-2xx status.
    """

    kind = ErrorKind.TRANSPORT_FAILURE


class MissingResultFieldError(TR064Error):
    """
    A requested result field wasn't present in the response body.
    """

    kind = ErrorKind.MISSING_RESULT_FIELD


class MalformedResponseError(TR064Error):
    """
    Got a response we didn't expect.
    """

    kind = ErrorKind.MALFORMED_RESPONSE


ERROR_CLASSES = dict((cls.kind, cls) for cls in (
    UnknownServiceError,
    TransportError,
    MissingResultFieldError,
    MalformedResponseError,
))
