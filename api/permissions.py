from rest_framework import permissions

from academias.utils import ROLE_ADMIN, usuario_tiene_roles


class EsMiembroAcademia(permissions.BasePermission):
    message = "Tu usuario no está vinculado a una academia."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        miembro = getattr(user, "miembro_academia", None)
        return bool(miembro and miembro.activo)


def role_required(*roles):
    class RolRequerido(permissions.BasePermission):
        message = "No tienes permisos para realizar esta acción."

        def has_permission(self, request, view):
            return bool(request.user and request.user.is_authenticated and usuario_tiene_roles(request.user, roles))

    return RolRequerido


class EscrituraSoloAdmin(permissions.BasePermission):
    """Lectura para cualquier miembro, escritura solo para administradores."""

    message = "Solo un administrador puede modificar la configuración."

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return usuario_tiene_roles(request.user, [ROLE_ADMIN])
