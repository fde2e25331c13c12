"""
Errors raised by the Azure DevOps client.

Fetch failures inside the polling loop never surface as exceptions; the
poller turns them into RunsUpdated(error=...) for the ErrorHandler.
"""


class PipewatchError(Exception):
    """Base class for pipewatch errors"""


class PipewatchAPIError(PipewatchError):
    """Azure DevOps answered with a non-2xx status, an unreadable body, or not at all.

    status_code is None when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PipewatchNotFoundError(PipewatchAPIError):
    """404: unknown build, log id, project or organization."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, status_code=404)
        self.path = path


class PipewatchAuthenticationError(PipewatchAPIError):
    """The PAT was rejected.

    401 means the token is invalid or expired. 403 means it is valid but
    lacks a scope the request needs (Build: Read covers everything here).
    """

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message, status_code=status_code)

    @property
    def missing_scope(self) -> bool:
        return self.status_code == 403
