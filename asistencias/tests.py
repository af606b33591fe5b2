import uuid
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from academias.models import Academia
from cuentas.models import Alumno, Profesor
from cursos.models import Curso
from gestionacademia.exceptions import NotFoundError, ValidationError
from inscripciones.models import Inscripcion
from inscripciones.services import crear_inscripcion

from .models import Asistencia
from .services import (
    calcular_delta,
    incrementar_clases_asistidas,
    listar_inscripciones_activas_por_curso,
    marcar_asistencia_alumno,
    obtener_asistencia_del_dia,
    registrar_asistencia,
)


class CalcularDeltaTests(TestCase):
    def test_transiciones(self):
        self.assertEqual(calcular_delta(False, True), 1)
        self.assertEqual(calcular_delta(True, False), -1)
        self.assertEqual(calcular_delta(True, True), 0)
        self.assertEqual(calcular_delta(False, False), 0)

    def test_sin_registro_cuenta_como_no_confirmada(self):
        self.assertEqual(calcular_delta(None, True), 1)
        self.assertEqual(calcular_delta(None, False), 0)

    def test_sin_valor_nuevo_no_mueve_el_contador(self):
        self.assertEqual(calcular_delta(True, None), 0)


class AsistenciaBaseTestCase(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(nombre="Academia Ritmo")
        self.profesor = Profesor.objects.create(academia=self.academia, nombre="Carlos Huaman")
        self.curso = Curso.objects.create(
            academia=self.academia,
            nombre="Bachata",
            precio=Decimal("120.00"),
            total_clases=8,
            profesor=self.profesor,
        )
        self.alumno = Alumno.objects.create(academia=self.academia, nombre="Ana Torres", dni="70123456")
        self.inscripcion = crear_inscripcion(self.alumno.pk, self.curso.pk)

    def _clases(self):
        self.inscripcion.refresh_from_db(fields=["clases_asistidas"])
        return self.inscripcion.clases_asistidas


class RegistrarAsistenciaTests(AsistenciaBaseTestCase):
    def test_confirmar_y_desconfirmar_mueve_el_contador(self):
        Inscripcion.objects.filter(pk=self.inscripcion.pk).update(clases_asistidas=3)

        asistencia = registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)
        self.assertTrue(asistencia.confirmada_por_admin)
        self.assertEqual(asistencia.inscripcion.clases_asistidas, 4)

        asistencia = registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=False)
        self.assertFalse(asistencia.confirmada_por_admin)
        self.assertEqual(self._clases(), 3)
        self.assertEqual(Asistencia.objects.filter(inscripcion=self.inscripcion).count(), 1)

    def test_repetir_la_confirmacion_no_suma_dos_veces(self):
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)

        self.assertEqual(self._clases(), 1)

    def test_contador_nunca_es_negativo(self):
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=False)
        Asistencia.objects.filter(inscripcion=self.inscripcion).update(confirmada_por_admin=True)

        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=False)

        self.assertEqual(self._clases(), 0)

    def test_dias_distintos_suman_por_separado(self):
        hoy = timezone.localdate()
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, fecha=hoy, confirmada_por_admin=True)
        registrar_asistencia(
            self.inscripcion.pk,
            self.profesor.pk,
            fecha=hoy - timedelta(days=1),
            confirmada_por_admin=True,
        )

        self.assertEqual(self._clases(), 2)

    def test_campos_sin_valor_conservan_lo_anterior(self):
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, marcada_por_alumno=True)

        asistencia = registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)

        self.assertTrue(asistencia.marcada_por_alumno)
        self.assertTrue(asistencia.confirmada_por_admin)

    def test_profesor_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            registrar_asistencia(self.inscripcion.pk, 9999, confirmada_por_admin=True)

        self.assertIn("profesor", ctx.exception.errores)
        self.assertEqual(self._clases(), 0)
        self.assertFalse(Asistencia.objects.exists())

    def test_profesor_de_otra_academia(self):
        otra = Academia.objects.create(nombre="Otra academia")
        ajeno = Profesor.objects.create(academia=otra, nombre="Luis Paredes")

        with self.assertRaises(ValidationError):
            registrar_asistencia(self.inscripcion.pk, ajeno.pk, confirmada_por_admin=True)

    def test_inscripcion_inexistente(self):
        with self.assertRaises(NotFoundError):
            registrar_asistencia(uuid.uuid4(), self.profesor.pk, confirmada_por_admin=True)

    def test_inscripcion_anulada(self):
        Inscripcion.objects.filter(pk=self.inscripcion.pk).update(activa=False)

        with self.assertRaises(ValidationError):
            registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)
        self.assertEqual(self._clases(), 0)


class IncrementarClasesTests(AsistenciaBaseTestCase):
    def test_no_baja_de_cero(self):
        incrementar_clases_asistidas(self.inscripcion.pk, -5)

        self.assertEqual(self._clases(), 0)

    def test_inscripcion_inexistente(self):
        with self.assertRaises(NotFoundError):
            incrementar_clases_asistidas(uuid.uuid4(), 1)


class MarcarAsistenciaAlumnoTests(AsistenciaBaseTestCase):
    def test_check_in_del_alumno_no_cambia_el_contador(self):
        asistencia = marcar_asistencia_alumno(self.inscripcion.pk)

        self.assertTrue(asistencia.marcada_por_alumno)
        self.assertFalse(asistencia.confirmada_por_admin)
        self.assertEqual(self._clases(), 0)
        self.assertEqual(obtener_asistencia_del_dia(self.inscripcion.pk).pk, asistencia.pk)


class RosterTests(AsistenciaBaseTestCase):
    def test_lista_inscripciones_activas_con_asistencia_del_dia(self):
        otro = Alumno.objects.create(academia=self.academia, nombre="Bruno Diaz", dni="70123457")
        anulado = Alumno.objects.create(academia=self.academia, nombre="Carla Soto", dni="70123458")
        crear_inscripcion(otro.pk, self.curso.pk)
        baja = crear_inscripcion(anulado.pk, self.curso.pk)
        Inscripcion.objects.filter(pk=baja.pk).update(activa=False)
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)

        filas = listar_inscripciones_activas_por_curso(self.curso.pk)

        self.assertEqual([fila["alumno"]["nombre"] for fila in filas], ["Ana Torres", "Bruno Diaz"])
        ana, bruno = filas
        self.assertTrue(ana["asistencia"]["tiene_asistencia"])
        self.assertTrue(ana["asistencia"]["confirmada_por_admin"])
        self.assertEqual(ana["asistencia"]["profesor_id"], self.profesor.pk)
        self.assertEqual(ana["clases_asistidas"], 1)
        self.assertFalse(bruno["asistencia"]["tiene_asistencia"])
        self.assertIsNone(bruno["asistencia"]["id"])

    def test_otra_fecha_no_muestra_asistencia(self):
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)

        filas = listar_inscripciones_activas_por_curso(self.curso.pk, fecha=date(2020, 1, 1))

        self.assertFalse(filas[0]["asistencia"]["tiene_asistencia"])

    def test_curso_de_otra_academia(self):
        otra = Academia.objects.create(nombre="Otra academia")

        with self.assertRaises(NotFoundError):
            listar_inscripciones_activas_por_curso(self.curso.pk, academia=otra)
