"""Errores de dominio.

Cada error conoce el status HTTP con el que se expone; el manejador de
``storetree.main`` los traduce sin filtrar detalles internos.
"""


class DomainError(Exception):
    """Base de todas las violaciones de reglas de negocio."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    """La entidad no existe."""

    status_code = 404
    default_message = "Resource not found"


class Forbidden(DomainError):
    """La entidad existe pero la regla de acceso la niega."""

    status_code = 403
    default_message = "Access denied"


class InvalidArgument(DomainError):
    """Entrada mal formada: campo requerido ausente o valor de enum invalido."""

    status_code = 400
    default_message = "Invalid argument"


class Conflict(DomainError):
    """Violacion de unicidad."""

    status_code = 409
    default_message = "Conflict"


class PreconditionFailed(DomainError):
    """Borrado bloqueado por hijos, usuarios asignados o nodo propio."""

    status_code = 400
    default_message = "Precondition failed"


class Unauthenticated(DomainError):
    """Credencial ausente o invalida."""

    status_code = 401
    default_message = "Authentication required"
