from __future__ import annotations


class AppError(RuntimeError):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InvalidStateError(AppError):
    status_code = 500


class BackendUnavailableError(AppError):
    status_code = 503
