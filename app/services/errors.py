"""
Errores de dominio.

Los servicios lanzan estas excepciones; main.py las traduce a respuestas HTTP.
Cada clase representa un tipo de error, no un caso puntual.
"""


class DomainError(Exception):
    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    status_code = 404
    kind = "NotFound"


class ForbiddenError(DomainError):
    status_code = 403
    kind = "Forbidden"


class PreconditionFailedError(ForbiddenError):
    """Falta un recurso previo (ej: inscripción al evento antes del challenge)"""

    kind = "PreconditionFailed"


class ConflictError(DomainError):
    status_code = 409
    kind = "Conflict"


class BadRequestError(DomainError):
    status_code = 400
    kind = "BadRequest"


class InvalidStateError(BadRequestError):
    kind = "InvalidState"
