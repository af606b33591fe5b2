import shutil
import tempfile
import threading
import uuid
from datetime import date
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import connection
from django.test import TestCase, TransactionTestCase, override_settings

from academias.models import Academia
from cuentas.models import Alumno
from cursos.models import Curso, Periodo
from gestionacademia.exceptions import NotFoundError, ValidationError

from .models import Inscripcion, Pago
from .services import (
    actualizar_inscripcion,
    actualizar_pago,
    agregar_pago,
    anular_inscripcion,
    calcular_cargo,
    crear_inscripcion,
    eliminar_inscripcion,
    eliminar_pago,
)


class InscripcionBaseTestCase(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(
            nombre="Academia Danza Lima",
            tiene_matricula=True,
            precio_matricula=Decimal("30.00"),
        )
        self.curso = Curso.objects.create(
            academia=self.academia,
            nombre="Salsa",
            precio=Decimal("150.00"),
            total_clases=8,
        )
        self.alumno = Alumno.objects.create(
            academia=self.academia,
            nombre="Lucia Quispe",
            dni="45871236",
        )

    def _inscribir(self, **kwargs):
        datos = {"incluye_matricula": True, "registrado_por": "admin@academia.pe"}
        datos.update(kwargs)
        return crear_inscripcion(self.alumno.pk, self.curso.pk, **datos)


class CalcularCargoTests(InscripcionBaseTestCase):
    def test_suma_curso_y_matricula(self):
        cargo = calcular_cargo(self.curso, self.academia, incluye_matricula=True)

        self.assertEqual(cargo.precio_curso, Decimal("150.00"))
        self.assertEqual(cargo.precio_matricula, Decimal("30.00"))
        self.assertEqual(cargo.precio_cobrado, Decimal("180.00"))

    def test_sin_matricula_no_cobra_matricula(self):
        cargo = calcular_cargo(self.curso, self.academia, incluye_matricula=False)

        self.assertEqual(cargo.precio_matricula, Decimal("0.00"))
        self.assertEqual(cargo.precio_cobrado, Decimal("150.00"))

    def test_precio_personalizado_reemplaza_precio_del_curso(self):
        cargo = calcular_cargo(self.curso, self.academia, True, precio_personalizado="120")

        self.assertEqual(cargo.precio_curso, Decimal("120.00"))
        self.assertEqual(cargo.precio_cobrado, Decimal("150.00"))

    def test_precio_personalizado_negativo_es_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            calcular_cargo(self.curso, self.academia, False, precio_personalizado="-5")
        self.assertIn("precio_personalizado", ctx.exception.errores)


class CrearInscripcionTests(InscripcionBaseTestCase):
    def test_precio_cobrado_incluye_matricula(self):
        inscripcion = self._inscribir()

        self.assertEqual(inscripcion.precio_cobrado, Decimal("180.00"))
        self.assertEqual(inscripcion.total_clases, 8)
        self.assertFalse(inscripcion.es_personalizada)
        self.assertEqual(inscripcion.clases_asistidas, 0)
        self.assertTrue(inscripcion.activa)

    def test_precio_no_cambia_si_se_edita_el_curso(self):
        inscripcion = self._inscribir()
        self.curso.precio = Decimal("200.00")
        self.curso.save()
        self.academia.precio_matricula = Decimal("50.00")
        self.academia.save()

        inscripcion.refresh_from_db()
        self.assertEqual(inscripcion.precio_curso, Decimal("150.00"))
        self.assertEqual(inscripcion.precio_cobrado, Decimal("180.00"))

    def test_valores_personalizados_marcan_la_inscripcion(self):
        inscripcion = self._inscribir(total_clases=4, incluye_matricula=False)

        self.assertTrue(inscripcion.es_personalizada)
        self.assertEqual(inscripcion.total_clases, 4)
        self.assertEqual(inscripcion.precio_cobrado, Decimal("150.00"))

    def test_curso_inexistente(self):
        with self.assertRaises(ValidationError) as ctx:
            crear_inscripcion(self.alumno.pk, 9999)
        self.assertIn("curso", ctx.exception.errores)
        self.assertFalse(Inscripcion.objects.exists())

    def test_alumno_inexistente(self):
        with self.assertRaises(ValidationError) as ctx:
            crear_inscripcion(9999, self.curso.pk)
        self.assertIn("alumno", ctx.exception.errores)

    def test_alumno_de_otra_academia(self):
        otra = Academia.objects.create(nombre="Otra academia")
        ajeno = Alumno.objects.create(academia=otra, nombre="Pedro Rojas", dni="41236987")

        with self.assertRaises(ValidationError) as ctx:
            crear_inscripcion(ajeno.pk, self.curso.pk)
        self.assertIn("alumno", ctx.exception.errores)

    def test_curso_inactivo(self):
        self.curso.activo = False
        self.curso.save()

        with self.assertRaises(ValidationError):
            self._inscribir()

    def test_total_clases_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            self._inscribir(total_clases=0)
        self.assertIn("total_clases", ctx.exception.errores)

    def test_periodo_completa_las_fechas(self):
        periodo = Periodo.objects.create(
            academia=self.academia,
            nombre="Marzo",
            fecha_inicio=date(2026, 3, 1),
            fecha_fin=date(2026, 3, 31),
        )
        inscripcion = self._inscribir(periodo_id=periodo.pk)

        self.assertEqual(inscripcion.fecha_inicio, date(2026, 3, 1))
        self.assertEqual(inscripcion.fecha_fin, date(2026, 3, 31))

    def test_fecha_fin_anterior_a_inicio(self):
        with self.assertRaises(ValidationError) as ctx:
            self._inscribir(fecha_inicio=date(2026, 3, 10), fecha_fin=date(2026, 3, 1))
        self.assertIn("fecha_fin", ctx.exception.errores)


class ActualizarInscripcionTests(InscripcionBaseTestCase):
    def test_precios_no_se_pueden_modificar(self):
        inscripcion = self._inscribir()

        with self.assertRaises(ValidationError):
            actualizar_inscripcion(inscripcion.pk, precio_cobrado="10")
        inscripcion.refresh_from_db()
        self.assertEqual(inscripcion.precio_cobrado, Decimal("180.00"))

    def test_cambiar_total_clases_la_personaliza(self):
        inscripcion = self._inscribir()

        inscripcion = actualizar_inscripcion(inscripcion.pk, total_clases=12)

        self.assertEqual(inscripcion.total_clases, 12)
        self.assertTrue(inscripcion.es_personalizada)

    def test_anular_es_baja_logica(self):
        inscripcion = self._inscribir()

        anular_inscripcion(inscripcion.pk)

        inscripcion.refresh_from_db()
        self.assertFalse(inscripcion.activa)

    def test_eliminar_borra_inscripcion_y_pagos(self):
        inscripcion = self._inscribir()
        agregar_pago(inscripcion.pk, "50.00", Pago.Metodo.EFECTIVO)

        eliminar_inscripcion(inscripcion.pk)

        self.assertFalse(Inscripcion.objects.filter(pk=inscripcion.pk).exists())
        self.assertFalse(Pago.objects.exists())

    def test_inscripcion_de_otra_academia_no_se_encuentra(self):
        inscripcion = self._inscribir()
        otra = Academia.objects.create(nombre="Otra academia")

        with self.assertRaises(NotFoundError):
            anular_inscripcion(inscripcion.pk, academia=otra)


class PagosTests(InscripcionBaseTestCase):
    def setUp(self):
        super().setUp()
        self.inscripcion = self._inscribir()

    def test_pagos_parciales_reducen_el_saldo(self):
        agregar_pago(self.inscripcion.pk, Decimal("100.00"), Pago.Metodo.EFECTIVO)
        agregar_pago(self.inscripcion.pk, Decimal("50.00"), Pago.Metodo.YAPE, codigo="OP-778812")

        self.assertEqual(self.inscripcion.total_pagado(), Decimal("150.00"))
        self.assertEqual(self.inscripcion.saldo(), Decimal("30.00"))

    def test_pagos_seguidos_se_conservan(self):
        primero = agregar_pago(self.inscripcion.pk, "20", Pago.Metodo.EFECTIVO)
        segundo = agregar_pago(self.inscripcion.pk, "30", Pago.Metodo.EFECTIVO)

        self.assertNotEqual(primero.pk, segundo.pk)
        self.assertEqual(self.inscripcion.pagos.count(), 2)
        self.assertEqual(self.inscripcion.total_pagado(), Decimal("50.00"))

    def test_eliminar_pago_devuelve_el_monto_al_saldo(self):
        pago = agregar_pago(self.inscripcion.pk, "100", Pago.Metodo.EFECTIVO)
        self.assertEqual(self.inscripcion.saldo(), Decimal("80.00"))

        self.assertTrue(eliminar_pago(self.inscripcion.pk, pago.pk))

        self.assertEqual(self.inscripcion.saldo(), Decimal("180.00"))

    def test_eliminar_pago_inexistente_no_cambia_nada(self):
        agregar_pago(self.inscripcion.pk, "100", Pago.Metodo.EFECTIVO)
        agregar_pago(self.inscripcion.pk, "50", Pago.Metodo.YAPE)

        self.assertFalse(eliminar_pago(self.inscripcion.pk, uuid.uuid4()))

        self.assertEqual(self.inscripcion.pagos.count(), 2)
        self.assertEqual(self.inscripcion.saldo(), Decimal("30.00"))

    def test_sobrepago_deja_saldo_negativo(self):
        agregar_pago(self.inscripcion.pk, "200", Pago.Metodo.EFECTIVO)

        self.assertEqual(self.inscripcion.saldo(), Decimal("-20.00"))

    def test_monto_negativo_es_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            agregar_pago(self.inscripcion.pk, "-10", Pago.Metodo.EFECTIVO)
        self.assertIn("monto", ctx.exception.errores)
        self.assertFalse(self.inscripcion.pagos.exists())

    def test_metodo_desconocido_es_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            agregar_pago(self.inscripcion.pk, "10", "tarjeta")
        self.assertIn("metodo", ctx.exception.errores)

    def test_pago_en_inscripcion_inexistente(self):
        with self.assertRaises(NotFoundError):
            agregar_pago(uuid.uuid4(), "10", Pago.Metodo.EFECTIVO)

    def test_actualizar_pago(self):
        pago = agregar_pago(self.inscripcion.pk, "100", Pago.Metodo.EFECTIVO)

        actualizado = actualizar_pago(self.inscripcion.pk, pago.pk, monto="120", codigo="REC-1")

        self.assertEqual(actualizado.monto, Decimal("120.00"))
        self.assertEqual(actualizado.codigo, "REC-1")
        self.assertEqual(self.inscripcion.saldo(), Decimal("60.00"))

    def test_actualizar_pago_inexistente_devuelve_none(self):
        agregar_pago(self.inscripcion.pk, "100", Pago.Metodo.EFECTIVO)

        self.assertIsNone(actualizar_pago(self.inscripcion.pk, uuid.uuid4(), monto="1"))
        self.assertEqual(self.inscripcion.total_pagado(), Decimal("100.00"))


class ComprobantesTests(InscripcionBaseTestCase):
    def setUp(self):
        super().setUp()
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        self.inscripcion = self._inscribir()

    def test_eliminar_pago_borra_el_comprobante(self):
        with override_settings(MEDIA_ROOT=self.media_root):
            pago = agregar_pago(
                self.inscripcion.pk,
                "50",
                Pago.Metodo.YAPE,
                codigo="OP-1",
                comprobante=SimpleUploadedFile("voucher.png", b"png", content_type="image/png"),
            )
            storage = pago.comprobante.storage
            nombre = pago.comprobante.name
            self.assertTrue(storage.exists(nombre))

            eliminar_pago(self.inscripcion.pk, pago.pk)

            self.assertFalse(storage.exists(nombre))


class PagosConcurrentesTests(TransactionTestCase):
    def setUp(self):
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            # La base en memoria compartida no admite escrituras desde otro hilo; usar DJANGO_DB_TEST_NAME.
            self.skipTest("requiere una base de pruebas en disco")
        academia = Academia.objects.create(nombre="Academia Danza Lima")
        curso = Curso.objects.create(academia=academia, nombre="Salsa", precio=Decimal("150.00"), total_clases=8)
        alumno = Alumno.objects.create(academia=academia, nombre="Lucia Quispe", dni="45871236")
        self.inscripcion = crear_inscripcion(alumno.pk, curso.pk)

    def test_dos_pagos_simultaneos_se_conservan(self):
        barrera = threading.Barrier(2)
        errores = []

        def pagar(monto, metodo):
            try:
                barrera.wait(timeout=5)
                agregar_pago(self.inscripcion.pk, monto, metodo, codigo=f"OP-{monto}")
            except Exception as exc:
                errores.append(exc)
            finally:
                connection.close()

        hilos = [
            threading.Thread(target=pagar, args=("20", Pago.Metodo.EFECTIVO)),
            threading.Thread(target=pagar, args=("30", Pago.Metodo.YAPE)),
        ]
        for hilo in hilos:
            hilo.start()
        for hilo in hilos:
            hilo.join()

        self.assertEqual(errores, [])
        self.assertEqual(self.inscripcion.pagos.count(), 2)
        self.assertEqual(self.inscripcion.total_pagado(), Decimal("50.00"))
        self.assertEqual(self.inscripcion.saldo(), Decimal("100.00"))
