from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase

from .models import Academia, MiembroAcademia
from .utils import ROLE_ADMIN, ROLE_PROFESOR, get_academia_for_user, usuario_tiene_roles


class AcademiaModelTests(TestCase):
    def test_sin_matricula_el_precio_queda_en_cero(self):
        academia = Academia.objects.create(nombre="Academia", precio_matricula=Decimal("40"))

        self.assertEqual(academia.precio_matricula, Decimal("0"))

    def test_matricula_sin_precio_es_invalida(self):
        academia = Academia(nombre="Academia", tiene_matricula=True, precio_matricula=Decimal("0"))

        with self.assertRaises(ValidationError):
            academia.full_clean()


class RolesTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.academia = Academia.objects.create(nombre="Academia")
        self.profe = User.objects.create_user(username="profe", password="123456")
        self.miembro = MiembroAcademia.objects.create(
            user=self.profe,
            academia=self.academia,
            rol=MiembroAcademia.Rol.PROFESOR,
        )
        self.sin_academia = User.objects.create_user(username="otro", password="123456")

    def test_roles(self):
        self.assertTrue(usuario_tiene_roles(self.profe, [ROLE_PROFESOR]))
        self.assertFalse(usuario_tiene_roles(self.profe, [ROLE_ADMIN]))
        self.assertTrue(usuario_tiene_roles(self.profe, []))
        self.assertFalse(usuario_tiene_roles(self.sin_academia, [ROLE_PROFESOR]))

    def test_miembro_inactivo_no_tiene_roles(self):
        self.miembro.activo = False
        self.miembro.save()

        self.assertFalse(usuario_tiene_roles(self.profe, [ROLE_PROFESOR]))
        with self.assertRaises(PermissionDenied):
            get_academia_for_user(self.profe)

    def test_academia_del_usuario(self):
        self.assertEqual(get_academia_for_user(self.profe), self.academia)
        with self.assertRaises(PermissionDenied):
            get_academia_for_user(self.sin_academia)
