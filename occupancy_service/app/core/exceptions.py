from shared.utils.app_status_code import AppStatusCode


class LifecycleError(Exception):
    """Base class for occupancy lifecycle failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LifecycleError):
    """Missing or malformed input. The caller can correct it and resubmit."""


class StateError(LifecycleError):
    """Operation invoked out of the allowed sequence."""


class ConflictError(LifecycleError):
    """Another transition changed the occupancy first. Reload and retry."""


class NotFoundError(LifecycleError):
    pass


class PersistenceError(LifecycleError):
    """The database failed. Nothing from the operation was committed."""


# exception class -> (http status, app status code)
HTTP_ERROR_MAP = {
    ValidationError: (422, AppStatusCode.INVALID_INPUT),
    StateError: (409, AppStatusCode.OPERATION_ERROR),
    ConflictError: (409, AppStatusCode.CONFLICT_RETRY),
    NotFoundError: (404, AppStatusCode.DATA_NOT_FOUND),
    PersistenceError: (503, AppStatusCode.OPERATION_FAILED),
    LifecycleError: (400, AppStatusCode.OPERATION_ERROR),
}
