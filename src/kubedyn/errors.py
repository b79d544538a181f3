"""
Exceptions raised by kubedyn. None of them are retried or recovered from inside the library.
"""


class KubedynError(Exception):
    """
    Base class for all errors raised by kubedyn.
    """


class UsageError(KubedynError, ValueError):
    """
    Raised when the calling code violates the contract of a function, for example by passing a malformed
    group-version string, or by supplying a name to an operation that acts on a whole collection. These indicate a
    bug in the caller and are raised before any request could be sent.
    """


class UnsupportedOperationError(UsageError):
    """
    Raised by pre-flight capability checks when a resource does not support the requested verb.
    """

    def __init__(self, resource: str, verb: str) -> None:
        super().__init__(f"Resource {resource!r} does not support the {verb!r} verb")
        self.resource = resource
        self.verb = verb


class ResourceNotFoundError(KubedynError, LookupError):
    """
    Raised when a resource is not present in the discovery data it was looked up in. This can legitimately happen
    if the caller's discovery data is stale.
    """
