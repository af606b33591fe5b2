from django.core.exceptions import ValidationError as DjangoValidationError


def buscar_por_pk(queryset, pk):
    """Devuelve el registro o ``None``, tambien cuando el identificador esta mal formado."""
    if pk in (None, ""):
        return None
    try:
        return queryset.filter(pk=pk).first()
    except (ValueError, TypeError, DjangoValidationError):
        return None
