"""Error taxonomy shared by the stores, the event service and the routers.

``ServiceError`` subclasses reach the HTTP layer and are rendered as
``{"error": message}`` with their ``status_code``. ``StoreError`` subclasses
never leave the event service: they switch it over to the fallback store or
get converted into an ``OperationFailed``.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400

    def __init__(self, errors: list):
        super().__init__("Validation failed")
        self.errors = errors


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 400


class InvalidInput(ServiceError):
    status_code = 400


class OperationFailed(ServiceError):
    status_code = 500


class StoreError(Exception):
    pass


class StoreUnavailable(StoreError):
    """No connection to the database."""


class StoreOperationFailed(StoreError):
    """The database rejected a query or a write."""
