import shutil
import tempfile
from io import StringIO
from pathlib import Path

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from openpyxl import Workbook

from academias.models import Academia
from gestionacademia.exceptions import ConstraintError, NotFoundError, ValidationError

from .management.commands.importar_alumnos import normalizar_dni
from .models import Alumno, Voluntario
from .services import (
    actualizar_alumno,
    actualizar_voluntario,
    anular_voluntario,
    eliminar_voluntario,
    registrar_alumno,
    registrar_check_in_voluntario,
    registrar_voluntario,
)
from .validators import es_dni_valido, validar_celular, validar_dni


class ValidadoresTests(TestCase):
    def test_dni_valido(self):
        self.assertTrue(es_dni_valido("45871236"))

    def test_dni_invalido(self):
        for dni in ["", "1234567", "123456789", "4587123a", "11111111"]:
            with self.subTest(dni=dni):
                self.assertFalse(es_dni_valido(dni))

    def test_validar_dni_levanta_error(self):
        with self.assertRaises(DjangoValidationError):
            validar_dni("00000000")

    def test_celular(self):
        validar_celular("")
        validar_celular("987654321")
        with self.assertRaises(DjangoValidationError):
            validar_celular("98765")


class NormalizarDniTests(TestCase):
    def test_numero_de_siete_digitos_recupera_el_cero(self):
        self.assertEqual(normalizar_dni(1234567), "01234567")
        self.assertEqual(normalizar_dni(1234567.0), "01234567")

    def test_numeros_cortos_no_se_rellenan(self):
        self.assertEqual(normalizar_dni(123), "123")
        self.assertFalse(es_dni_valido(normalizar_dni(123)))

    def test_texto_se_respeta(self):
        self.assertEqual(normalizar_dni(" 123 "), "123")
        self.assertEqual(normalizar_dni("0123456"), "0123456")
        self.assertEqual(normalizar_dni(None), "")


class RegistrarAlumnoTests(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(nombre="Academia Norte")

    def test_registra_alumno(self):
        alumno = registrar_alumno(
            self.academia,
            registrado_por="admin@academia.pe",
            nombre="Rosa Mamani",
            dni="47851236",
            celular="987654321",
        )

        self.assertEqual(alumno.academia, self.academia)
        self.assertEqual(alumno.registrado_por, "admin@academia.pe")

    def test_dni_duplicado_en_la_misma_academia(self):
        registrar_alumno(self.academia, nombre="Rosa Mamani", dni="47851236")

        with self.assertRaises(ConstraintError) as ctx:
            registrar_alumno(self.academia, nombre="Rosa M.", dni="47851236")
        self.assertEqual(ctx.exception.mensaje, "Ya existe un alumno registrado con ese DNI")

    def test_mismo_dni_en_otra_academia(self):
        otra = Academia.objects.create(nombre="Academia Sur")
        registrar_alumno(self.academia, nombre="Rosa Mamani", dni="47851236")

        registrar_alumno(otra, nombre="Rosa Mamani", dni="47851236")

        self.assertEqual(Alumno.objects.filter(dni="47851236").count(), 2)

    def test_dni_invalido(self):
        with self.assertRaises(ValidationError) as ctx:
            registrar_alumno(self.academia, nombre="Rosa Mamani", dni="123")
        self.assertIn("dni", ctx.exception.errores)

    def test_menor_de_edad_requiere_apoderado(self):
        with self.assertRaises(ValidationError) as ctx:
            registrar_alumno(self.academia, nombre="Nico Paz", dni="71234568", edad=15, es_menor_edad=True)
        self.assertIn("nombre_apoderado", ctx.exception.errores)

    def test_actualizar_alumno(self):
        alumno = registrar_alumno(self.academia, nombre="Rosa Mamani", dni="47851236")

        actualizar_alumno(alumno, nombre="Rosa Mamani Quispe")

        alumno.refresh_from_db()
        self.assertEqual(alumno.nombre, "Rosa Mamani Quispe")


class ImportarAlumnosTests(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(nombre="Academia Centro")
        Alumno.objects.create(academia=self.academia, nombre="Existente", dni="40000001")
        self.tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmpdir, ignore_errors=True)
        self.archivo = Path(self.tmpdir) / "alumnos.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.append(["Nombre", "DNI", "Edad", "Género", "Celular", "Apoderado"])
        ws.append(["Mario Vargas", "45871236", 30, "Varón", "987654321", ""])
        ws.append(["Sofia Leon", 1234567, 16, "Dama", "", "Elena Leon"])
        ws.append(["Duplicado", "40000001", 20, "", "", ""])
        ws.append(["Sin DNI valido", "123", 20, "", "", ""])
        ws.append(["Repetido en planilla", "45871236", 22, "", "", ""])
        ws.append(["Menor sin apoderado", "45871299", 15, "Varón", "", ""])
        wb.save(self.archivo)

    def test_importa_omitiendo_dni_invalidos_y_duplicados(self):
        salida = StringIO()
        call_command("importar_alumnos", str(self.archivo), academia=self.academia.pk, stdout=salida)

        self.assertEqual(Alumno.objects.filter(academia=self.academia).count(), 3)
        sofia = Alumno.objects.get(dni="01234567")
        self.assertTrue(sofia.es_menor_edad)
        self.assertEqual(sofia.genero, Alumno.Genero.DAMA)
        self.assertEqual(sofia.nombre_apoderado, "Elena Leon")
        self.assertIn("Alumnos creados: 2 (4 omitidos)", salida.getvalue())
        self.assertIn("DNI invalido (123)", salida.getvalue())

    def test_menor_sin_apoderado_se_omite(self):
        salida = StringIO()
        call_command("importar_alumnos", str(self.archivo), academia=self.academia.pk, stdout=salida)

        self.assertFalse(Alumno.objects.filter(dni="45871299").exists())
        self.assertIn("[Fila 7]", salida.getvalue())
        self.assertIn("nombre_apoderado", salida.getvalue())

    def test_fila_que_no_pasa_la_validacion_del_modelo_se_omite(self):
        archivo = Path(self.tmpdir) / "largo.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.append(["Nombre", "DNI", "Edad"])
        ws.append(["L" * 300, "45871277", 30])
        ws.append(["Pedro Rojas", "45871278", 30])
        wb.save(archivo)

        salida = StringIO()
        call_command("importar_alumnos", str(archivo), academia=self.academia.pk, stdout=salida)

        self.assertFalse(Alumno.objects.filter(dni="45871277").exists())
        self.assertTrue(Alumno.objects.filter(dni="45871278").exists())
        self.assertIn("Alumnos creados: 1 (1 omitidos)", salida.getvalue())

    def test_dry_run_no_escribe(self):
        salida = StringIO()
        call_command(
            "importar_alumnos",
            str(self.archivo),
            academia=self.academia.pk,
            dry_run=True,
            stdout=salida,
        )

        self.assertEqual(Alumno.objects.filter(academia=self.academia).count(), 1)
        self.assertIn("Se crearian 2 alumnos", salida.getvalue())

    def test_academia_inexistente(self):
        with self.assertRaises(CommandError):
            call_command("importar_alumnos", str(self.archivo), academia=9999, stdout=StringIO())


class VoluntarioServiciosTests(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(nombre="Academia Centro")
        self.tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmpdir, ignore_errors=True)

    def _registrar(self, **extra):
        datos = {
            "nombre": "Carla Ramos",
            "dni": "45871240",
            "edad": 22,
            "comision": "Logistica",
            "terminos_aceptados": True,
        }
        datos.update(extra)
        return registrar_voluntario(self.academia, **datos)

    def test_registra_voluntario(self):
        voluntario = self._registrar(talla_polo="M")

        self.assertEqual(voluntario.academia, self.academia)
        self.assertTrue(voluntario.activo)
        self.assertFalse(voluntario.presente)

    def test_comision_requerida(self):
        with self.assertRaises(ValidationError) as ctx:
            self._registrar(comision="")
        self.assertIn("comision", ctx.exception.errores)

    def test_menor_de_edad_requiere_apoderado(self):
        with self.assertRaises(ValidationError) as ctx:
            self._registrar(edad=15, es_menor_edad=True)
        self.assertIn("nombre_apoderado", ctx.exception.errores)

    def test_dni_duplicado(self):
        self._registrar()

        with self.assertRaises(ConstraintError) as ctx:
            self._registrar(nombre="Carla R.")
        self.assertEqual(ctx.exception.mensaje, "Ya existe una inscripción de voluntario con el mismo DNI")

    def test_check_in_alterna_presencia(self):
        voluntario = self._registrar()

        registrar_check_in_voluntario(voluntario.pk)
        voluntario.refresh_from_db()
        self.assertTrue(voluntario.presente)
        self.assertIsNotNone(voluntario.check_in_en)

        registrar_check_in_voluntario(str(voluntario.pk))
        voluntario.refresh_from_db()
        self.assertFalse(voluntario.presente)
        self.assertIsNone(voluntario.check_in_en)

    def test_check_in_de_voluntario_anulado(self):
        voluntario = anular_voluntario(self._registrar())

        with self.assertRaises(ValidationError):
            registrar_check_in_voluntario(voluntario.pk)

    def test_check_in_de_otra_academia(self):
        voluntario = self._registrar()
        otra = Academia.objects.create(nombre="Otra")

        with self.assertRaises(NotFoundError):
            registrar_check_in_voluntario(voluntario.pk, academia=otra)
        with self.assertRaises(NotFoundError):
            registrar_check_in_voluntario("no-es-uuid")

    def test_reemplazar_y_eliminar_comprobante(self):
        with self.settings(MEDIA_ROOT=self.tmpdir):
            voluntario = self._registrar(
                metodo_pago=Voluntario.MetodoPago.YAPE,
                comprobante_pago=SimpleUploadedFile("yape.png", b"img", content_type="image/png"),
            )
            primero = Path(voluntario.comprobante_pago.path)
            self.assertTrue(primero.exists())

            actualizar_voluntario(
                voluntario,
                comprobante_pago=SimpleUploadedFile("yape2.png", b"img2", content_type="image/png"),
            )
            segundo = Path(voluntario.comprobante_pago.path)
            self.assertFalse(primero.exists())
            self.assertTrue(segundo.exists())

            eliminar_voluntario(voluntario)
            self.assertFalse(segundo.exists())
            self.assertFalse(Voluntario.objects.exists())
