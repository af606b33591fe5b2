"""
Errores de dominio compartidos por los servicios de la academia.

Los servicios levantan estas excepciones; la capa API las traduce a respuestas
JSON con un mensaje en español (ver ``api.exceptions``).
"""

from contextlib import contextmanager

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError


class AcademiaError(Exception):
    status_code = 400
    mensaje_por_defecto = "No se pudo completar la operacion."

    def __init__(self, mensaje=None, errores=None):
        self.mensaje = mensaje or self.mensaje_por_defecto
        self.errores = errores or {}
        super().__init__(self.mensaje)


class ValidationError(AcademiaError):
    status_code = 400
    mensaje_por_defecto = "Verifica que los datos sean correctos."


class NotFoundError(AcademiaError):
    status_code = 404
    mensaje_por_defecto = "El registro solicitado no existe."


class ConstraintError(AcademiaError):
    status_code = 409
    mensaje_por_defecto = "El registro ya existe."


class BackendError(AcademiaError):
    status_code = 503
    mensaje_por_defecto = "No se pudo conectar con la base de datos."


@contextmanager
def traducir_errores_bd(mensaje, mensaje_duplicado=None):
    try:
        yield
    except IntegrityError as exc:
        raise ConstraintError(mensaje_duplicado or mensaje) from exc
    except DatabaseError as exc:
        raise BackendError(mensaje) from exc


def validar_modelo(instancia, mensaje, exclude=None):
    """Ejecuta ``full_clean`` y convierte sus errores en ``ValidationError`` de dominio.

    Las restricciones de unicidad se dejan a la base de datos para que un
    duplicado llegue como ``ConstraintError``.
    """
    try:
        instancia.full_clean(exclude=exclude, validate_unique=False, validate_constraints=False)
    except DjangoValidationError as exc:
        raise ValidationError(mensaje, errores=exc.message_dict) from exc
