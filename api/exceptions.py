import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from gestionacademia.exceptions import AcademiaError, BackendError

logger = logging.getLogger(__name__)


def _nombre_vista(context):
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "-"


def manejar_excepcion(exc, context):
    """Convierte los errores de dominio en respuestas JSON con mensaje en español."""
    if isinstance(exc, AcademiaError):
        if isinstance(exc, BackendError):
            logger.error("%s: %s", _nombre_vista(context), exc.mensaje, exc_info=exc)
        else:
            logger.warning("%s: %s %s", _nombre_vista(context), exc.mensaje, exc.errores)
        data = {"detail": exc.mensaje}
        if exc.errores:
            data["errores"] = exc.errores
        return Response(data, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        logger.warning("%s: %s", _nombre_vista(context), response.data)
    return response
