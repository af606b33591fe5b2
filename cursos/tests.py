from datetime import date, time
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from academias.models import Academia
from cuentas.models import Profesor

from .models import Curso, Horario, Periodo


class HorarioTests(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(nombre="Academia")

    def test_dias_display(self):
        horario = Horario(academia=self.academia, nombre="Noche", dias=["lunes", "miercoles"])
        self.assertEqual(horario.dias_display, "Lunes, Miercoles")

    def test_validaciones(self):
        horario = Horario(
            academia=self.academia,
            nombre="Mal",
            dias=["feriado"],
            hora_inicio=time(20),
            hora_fin=time(19),
        )
        with self.assertRaises(ValidationError) as ctx:
            horario.full_clean()
        self.assertIn("dias", ctx.exception.message_dict)
        self.assertIn("hora_fin", ctx.exception.message_dict)

    def test_periodo_con_fechas_invertidas(self):
        periodo = Periodo(
            academia=self.academia,
            nombre="Abril",
            fecha_inicio=date(2026, 4, 30),
            fecha_fin=date(2026, 4, 1),
        )
        with self.assertRaises(ValidationError):
            periodo.full_clean()


class CursoTests(TestCase):
    def test_profesor_debe_ser_de_la_misma_academia(self):
        academia = Academia.objects.create(nombre="Academia")
        otra = Academia.objects.create(nombre="Otra")
        profesor = Profesor.objects.create(academia=otra, nombre="Luis")
        curso = Curso(academia=academia, nombre="Salsa", precio=Decimal("100"), profesor=profesor)

        with self.assertRaises(ValidationError) as ctx:
            curso.full_clean()
        self.assertIn("profesor", ctx.exception.message_dict)
