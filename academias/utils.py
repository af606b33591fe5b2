from django.core.exceptions import PermissionDenied

from .models import MiembroAcademia

ROLE_ADMIN = MiembroAcademia.Rol.ADMIN
ROLE_PROFESOR = MiembroAcademia.Rol.PROFESOR


def get_miembro_for_user(user):
    if not user.is_authenticated:
        raise PermissionDenied("Debes iniciar sesión.")
    try:
        miembro = user.miembro_academia
    except MiembroAcademia.DoesNotExist:
        raise PermissionDenied("Tu usuario no está vinculado a una academia.")
    if not miembro.activo:
        raise PermissionDenied("Tu acceso a la academia está desactivado.")
    return miembro


def get_academia_for_user(user):
    return get_miembro_for_user(user).academia


def usuario_tiene_roles(user, roles) -> bool:
    if not roles:
        return True
    if user.is_superuser:
        return True
    miembro = getattr(user, "miembro_academia", None)
    if not miembro or not miembro.activo:
        return False
    return miembro.rol in roles
