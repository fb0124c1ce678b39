"""Typed service errors.

Route handlers translate these into JSON responses using ``status_code``.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        data = {'message': self.message}
        if self.payload:
            data.update(self.payload)
        return data


class NotFoundError(ServiceError):
    status_code = 404


class RegistrantNotFound(NotFoundError):
    pass


class RegistrationNotFound(NotFoundError):
    pass


class PermissionDeniedError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409


class TransitionNotAllowed(ServiceError):
    status_code = 400
