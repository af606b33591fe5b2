import re

from django.core.exceptions import ValidationError

DNI_PATTERN = re.compile(r"^\d{8}$")
CELULAR_PATTERN = re.compile(r"^\d{9}$")


def es_dni_valido(dni: str) -> bool:
    """DNI peruano: 8 digitos, descartando los formados por un solo digito repetido."""
    if not dni or not DNI_PATTERN.match(dni):
        return False
    return len(set(dni)) > 1


def validar_dni(value):
    if not es_dni_valido(value):
        raise ValidationError("DNI inválido (debe tener 8 dígitos)")


def validar_celular(value):
    if value and not CELULAR_PATTERN.match(value):
        raise ValidationError("El número debe tener exactamente 9 dígitos numéricos")
