import shutil
import tempfile
import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from academias.models import Academia, MiembroAcademia
from asistencias.models import Asistencia
from cuentas.models import Alumno, Profesor, Voluntario
from cursos.models import Curso, Horario
from inscripciones.models import Inscripcion, Pago
from inscripciones.services import agregar_pago, crear_inscripcion


class HealthEndpointTests(APITestCase):
    def test_health_returns_ok(self):
        url = reverse("api-health")
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "ok")
        self.assertIn("timestamp", response.data)


class AuthenticationFlowTests(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(
            username="martina",
            email="martina@example.com",
            password="clave-secreta",
            first_name="Martina",
            last_name="Rios",
        )
        self.academia = Academia.objects.create(nombre="Academia Lima")
        MiembroAcademia.objects.create(user=self.user, academia=self.academia, rol=MiembroAcademia.Rol.ADMIN)
        self.login_url = reverse("auth-login")
        self.refresh_url = reverse("auth-refresh")
        self.logout_url = reverse("auth-logout")

    def test_login_returns_token_and_user_payload(self):
        response = self.client.post(
            self.login_url,
            {"username": "martina", "password": "clave-secreta"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("token", response.data)
        self.assertEqual(response.data["user"]["email"], "martina@example.com")
        self.assertEqual(response.data["user"]["academia"], self.academia.pk)
        self.assertEqual(response.data["user"]["rol"], "admin")

    def test_login_with_email(self):
        response = self.client.post(
            self.login_url,
            {"email": "martina@example.com", "password": "clave-secreta"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_with_invalid_credentials_fails(self):
        response = self.client.post(
            self.login_url,
            {"username": "martina", "password": "otra-clave"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_rotates_token(self):
        login_response = self.client.post(
            self.login_url,
            {"username": "martina", "password": "clave-secreta"},
            format="json",
        )
        old_token = login_response.data["token"]

        refresh_response = self.client.post(
            self.refresh_url,
            {},
            format="json",
            HTTP_AUTHORIZATION=f"Token {old_token}",
        )

        self.assertEqual(refresh_response.status_code, status.HTTP_200_OK)
        self.assertNotEqual(refresh_response.data["token"], old_token)
        self.assertFalse(Token.objects.filter(key=old_token).exists())

    def test_logout_revokes_token(self):
        login_response = self.client.post(
            self.login_url,
            {"username": "martina", "password": "clave-secreta"},
            format="json",
        )
        token = login_response.data["token"]

        logout_response = self.client.post(
            self.logout_url,
            {},
            format="json",
            HTTP_AUTHORIZATION=f"Token {token}",
        )

        self.assertEqual(logout_response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Token.objects.filter(key=token).exists())


class AcademiaApiTestCase(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.academia = Academia.objects.create(
            nombre="Academia Danza Lima",
            tiene_matricula=True,
            precio_matricula=Decimal("30.00"),
        )
        self.admin = User.objects.create_user(username="admin", email="admin@academia.pe", password="123456")
        MiembroAcademia.objects.create(user=self.admin, academia=self.academia, rol=MiembroAcademia.Rol.ADMIN)

        self.usuario_profesor = User.objects.create_user(username="profe", password="123456")
        MiembroAcademia.objects.create(
            user=self.usuario_profesor,
            academia=self.academia,
            rol=MiembroAcademia.Rol.PROFESOR,
        )
        self.profesor = Profesor.objects.create(
            academia=self.academia,
            nombre="Carlos Huaman",
            user=self.usuario_profesor,
        )
        self.curso = Curso.objects.create(
            academia=self.academia,
            nombre="Salsa",
            precio=Decimal("150.00"),
            total_clases=8,
            profesor=self.profesor,
        )
        self.alumno = Alumno.objects.create(academia=self.academia, nombre="Lucia Quispe", dni="45871236")

        self.otra_academia = Academia.objects.create(nombre="Otra academia")
        self.alumno_ajeno = Alumno.objects.create(
            academia=self.otra_academia,
            nombre="Pedro Rojas",
            dni="41236987",
        )

        self.client.force_authenticate(self.admin)

    def _inscribir(self):
        return crear_inscripcion(self.alumno.pk, self.curso.pk, incluye_matricula=True)


class PermisosTests(AcademiaApiTestCase):
    def test_requiere_autenticacion(self):
        self.client.force_authenticate(None)
        response = self.client.get("/api/alumnos/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_usuario_sin_academia(self):
        sin_academia = get_user_model().objects.create_user(username="suelto", password="123456")
        self.client.force_authenticate(sin_academia)

        response = self.client.get("/api/alumnos/")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_profesor_no_puede_crear_cursos(self):
        self.client.force_authenticate(self.usuario_profesor)

        response = self.client.post("/api/cursos/", {"nombre": "Tango", "precio": "100"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_profesor_puede_ver_cursos(self):
        self.client.force_authenticate(self.usuario_profesor)

        response = self.client.get("/api/cursos/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)


class AcademiaEndpointTests(AcademiaApiTestCase):
    def test_obtiene_la_academia_del_usuario(self):
        response = self.client.get("/api/academia/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["nombre"], "Academia Danza Lima")
        self.assertEqual(response.data["precio_matricula"], "30.00")

    def test_matricula_requiere_precio(self):
        response = self.client.patch("/api/academia/", {"precio_matricula": "0"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("precio_matricula", response.data)

    def test_solo_admin_modifica_la_academia(self):
        self.client.force_authenticate(self.usuario_profesor)

        response = self.client.patch("/api/academia/", {"nombre": "Nuevo"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], "No tienes permisos para realizar esta acción.")
        self.academia.refresh_from_db()
        self.assertEqual(self.academia.nombre, "Academia Danza Lima")


class AlumnoEndpointTests(AcademiaApiTestCase):
    def test_lista_solo_alumnos_de_la_academia(self):
        response = self.client.get("/api/alumnos/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([alumno["dni"] for alumno in response.data], ["45871236"])

    def test_busqueda(self):
        Alumno.objects.create(academia=self.academia, nombre="Marco Polo", dni="45871237")

        response = self.client.get("/api/alumnos/", {"q": "marco"})

        self.assertEqual([alumno["nombre"] for alumno in response.data], ["Marco Polo"])

    def test_alumno_de_otra_academia_no_existe(self):
        response = self.client.get(f"/api/alumnos/{self.alumno_ajeno.pk}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_crear_alumno(self):
        response = self.client.post(
            "/api/alumnos/",
            {"nombre": "Rosa Mamani", "dni": "47851236", "celular": "987654321"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        alumno = Alumno.objects.get(dni="47851236")
        self.assertEqual(alumno.academia, self.academia)
        self.assertEqual(alumno.registrado_por, "admin@academia.pe")

    def test_dni_duplicado_devuelve_conflicto(self):
        response = self.client.post(
            "/api/alumnos/",
            {"nombre": "Lucia Q.", "dni": "45871236"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["detail"], "Ya existe un alumno registrado con ese DNI")

    def test_dni_invalido(self):
        response = self.client.post("/api/alumnos/", {"nombre": "X", "dni": "11111111"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("dni", response.data)

    def test_estadisticas_e_inscripciones(self):
        self._inscribir()

        estadisticas = self.client.get(f"/api/alumnos/{self.alumno.pk}/estadisticas/")
        inscripciones = self.client.get(f"/api/alumnos/{self.alumno.pk}/inscripciones/")

        self.assertEqual(estadisticas.data, {"total_inscripciones": 1})
        self.assertEqual(len(inscripciones.data), 1)
        self.assertEqual(inscripciones.data[0]["precio_cobrado"], "180.00")

    def test_eliminar_alumno_borra_sus_comprobantes(self):
        media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, media_root, ignore_errors=True)
        inscripcion = self._inscribir()
        with override_settings(MEDIA_ROOT=media_root):
            pago = agregar_pago(
                inscripcion.pk,
                "50",
                Pago.Metodo.YAPE,
                codigo="OP-2",
                comprobante=SimpleUploadedFile("voucher.png", b"png", content_type="image/png"),
            )
            storage = pago.comprobante.storage
            nombre = pago.comprobante.name
            self.assertTrue(storage.exists(nombre))

            response = self.client.delete(f"/api/alumnos/{self.alumno.pk}/")

            self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
            self.assertFalse(Alumno.objects.filter(pk=self.alumno.pk).exists())
            self.assertFalse(Pago.objects.exists())
            self.assertFalse(storage.exists(nombre))


class CursoEndpointTests(AcademiaApiTestCase):
    def test_crear_curso(self):
        horario = Horario.objects.create(
            academia=self.academia,
            nombre="Noche",
            dias=["lunes", "miercoles"],
            hora_inicio="19:00",
            hora_fin="20:30",
        )

        response = self.client.post(
            "/api/cursos/",
            {"nombre": "Tango", "precio": "100.00", "total_clases": 8, "horario": horario.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Curso.objects.get(nombre="Tango").academia, self.academia)

    def test_horario_de_otra_academia_es_invalido(self):
        ajeno = Horario.objects.create(
            academia=self.otra_academia,
            nombre="Tarde",
            dias=["martes"],
            hora_inicio="15:00",
            hora_fin="16:00",
        )

        response = self.client.post(
            "/api/cursos/",
            {"nombre": "Tango", "precio": "100.00", "horario": ajeno.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("horario", response.data)

    def test_crear_horario_valida_dias(self):
        response = self.client.post(
            "/api/horarios/",
            {"nombre": "Mal", "dias": ["feriado"], "hora_inicio": "10:00", "hora_fin": "11:00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_curso_con_inscripciones_no_se_elimina(self):
        self._inscribir()

        response = self.client.delete(f"/api/cursos/{self.curso.pk}/")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Curso.objects.filter(pk=self.curso.pk).exists())

    def test_roster_del_dia(self):
        inscripcion = self._inscribir()
        self.client.post(
            f"/api/inscripciones/{inscripcion.pk}/asistencia/",
            {"confirmada_por_admin": True, "profesor": self.profesor.pk},
            format="json",
        )

        response = self.client.get(f"/api/cursos/{self.curso.pk}/inscripciones-activas/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        fila = response.data[0]
        self.assertEqual(fila["id"], str(inscripcion.pk))
        self.assertEqual(fila["alumno"]["dni"], "45871236")
        self.assertTrue(fila["asistencia"]["confirmada_por_admin"])
        self.assertEqual(fila["clases_asistidas"], 1)

    def test_roster_fecha_invalida(self):
        response = self.client.get(f"/api/cursos/{self.curso.pk}/inscripciones-activas/", {"fecha": "ayer"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("fecha", response.data["errores"])


class InscripcionEndpointTests(AcademiaApiTestCase):
    def test_crear_inscripcion(self):
        response = self.client.post(
            "/api/inscripciones/",
            {"alumno": self.alumno.pk, "curso": self.curso.pk, "incluye_matricula": True},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["inscripcion"]["precio_cobrado"], "180.00")
        self.assertEqual(response.data["inscripcion"]["saldo"], "180.00")
        self.assertEqual(response.data["inscripcion"]["registrado_por"], "admin@academia.pe")

    def test_crear_inscripcion_con_alumno_ajeno(self):
        response = self.client.post(
            "/api/inscripciones/",
            {"alumno": self.alumno_ajeno.pk, "curso": self.curso.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["detail"],
            "La inscripcion no se pudo crear, verifica que los datos sean correctos",
        )
        self.assertIn("alumno", response.data["errores"])

    def test_pagos_y_saldo(self):
        inscripcion = self._inscribir()
        url = f"/api/inscripciones/{inscripcion.pk}/pagos/"

        self.client.post(url, {"monto": "100.00", "metodo": "efectivo"}, format="json")
        response = self.client.post(url, {"monto": "50.00", "metodo": "yape", "codigo": "OP-1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["inscripcion"]["total_pagado"], "150.00")
        self.assertEqual(response.data["inscripcion"]["saldo"], "30.00")
        self.assertEqual(len(response.data["inscripcion"]["pagos"]), 2)
        self.assertEqual(response.data["pago"]["metodo"], "yape")

    def test_metodo_de_pago_invalido(self):
        inscripcion = self._inscribir()

        response = self.client.post(
            f"/api/inscripciones/{inscripcion.pk}/pagos/",
            {"monto": "10", "metodo": "tarjeta"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_eliminar_pago_inexistente_no_cambia_nada(self):
        inscripcion = self._inscribir()
        Pago.objects.create(inscripcion=inscripcion, monto=Decimal("100"), metodo=Pago.Metodo.EFECTIVO)
        Pago.objects.create(inscripcion=inscripcion, monto=Decimal("50"), metodo=Pago.Metodo.YAPE)

        response = self.client.delete(f"/api/inscripciones/{inscripcion.pk}/pagos/{uuid.uuid4()}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(inscripcion.pagos.count(), 2)
        self.assertEqual(response.data["inscripcion"]["saldo"], "30.00")

    def test_actualizar_y_eliminar_pago(self):
        inscripcion = self._inscribir()
        pago = Pago.objects.create(inscripcion=inscripcion, monto=Decimal("100"), metodo=Pago.Metodo.EFECTIVO)
        url = f"/api/inscripciones/{inscripcion.pk}/pagos/{pago.pk}/"

        response = self.client.patch(url, {"monto": "80.00"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["inscripcion"]["saldo"], "100.00")

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["inscripcion"]["saldo"], "180.00")
        self.assertFalse(Pago.objects.filter(pk=pago.pk).exists())

    def test_precios_no_se_editan(self):
        inscripcion = self._inscribir()

        response = self.client.patch(
            f"/api/inscripciones/{inscripcion.pk}/",
            {"precio_cobrado": "10.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        inscripcion.refresh_from_db()
        self.assertEqual(inscripcion.precio_cobrado, Decimal("180.00"))

    def test_editar_total_clases(self):
        inscripcion = self._inscribir()

        response = self.client.patch(f"/api/inscripciones/{inscripcion.pk}/", {"total_clases": 10}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["inscripcion"]["total_clases"], 10)
        self.assertTrue(response.data["inscripcion"]["es_personalizada"])

    def test_anular_y_eliminar(self):
        inscripcion = self._inscribir()
        url = f"/api/inscripciones/{inscripcion.pk}/"

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["inscripcion"]["activa"])

        self.client.force_authenticate(self.usuario_profesor)
        response = self.client.delete(f"{url}?definitivo=1")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(f"{url}?definitivo=1")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Inscripcion.objects.filter(pk=inscripcion.pk).exists())

    def test_filtros_por_alumno_y_curso(self):
        inscripcion = self._inscribir()

        response = self.client.get("/api/inscripciones/", {"alumno": self.alumno.pk, "curso": self.curso.pk})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([fila["id"] for fila in response.data], [str(inscripcion.pk)])

    def test_filtro_con_id_no_numerico(self):
        self._inscribir()

        for campo in ["alumno", "curso"]:
            with self.subTest(campo=campo):
                response = self.client.get("/api/inscripciones/", {campo: "abc"})

                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(campo, response.data["errores"])

    def test_inscripcion_inexistente(self):
        response = self.client.post(
            f"/api/inscripciones/{uuid.uuid4()}/pagos/",
            {"monto": "10", "metodo": "efectivo"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["detail"], "Inscripción no encontrada")


class AsistenciaEndpointTests(AcademiaApiTestCase):
    def setUp(self):
        super().setUp()
        self.inscripcion = self._inscribir()
        self.url = f"/api/inscripciones/{self.inscripcion.pk}/asistencia/"

    def test_confirmar_y_revertir(self):
        response = self.client.post(
            self.url,
            {"confirmada_por_admin": True, "profesor": self.profesor.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["clases_asistidas"], 1)

        response = self.client.post(
            self.url,
            {"confirmada_por_admin": False, "profesor": self.profesor.pk},
            format="json",
        )
        self.assertEqual(response.data["clases_asistidas"], 0)

    def test_profesor_por_defecto_es_el_usuario(self):
        self.client.force_authenticate(self.usuario_profesor)

        response = self.client.post(self.url, {"confirmada_por_admin": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["asistencia"]["profesor"], self.profesor.pk)

    def test_sin_profesor(self):
        response = self.client.post(self.url, {"confirmada_por_admin": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("profesor", response.data["errores"])
        self.assertFalse(Asistencia.objects.exists())

    def test_consultar_asistencia_del_dia(self):
        response = self.client.get(self.url)
        self.assertIsNone(response.data["asistencia"])

        self.client.post(self.url, {"confirmada_por_admin": True, "profesor": self.profesor.pk}, format="json")
        response = self.client.get(self.url)

        self.assertTrue(response.data["asistencia"]["confirmada_por_admin"])
        self.assertEqual(response.data["clases_asistidas"], 1)


class ReporteEndpointTests(AcademiaApiTestCase):
    def test_resumen(self):
        inscripcion = self._inscribir()
        Pago.objects.create(inscripcion=inscripcion, monto=Decimal("100"), metodo=Pago.Metodo.EFECTIVO)

        response = self.client.get("/api/reportes/resumen/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_cobrado"], "180.00")
        self.assertEqual(response.data["total_pagado"], "100.00")
        self.assertEqual(response.data["saldo_pendiente"], "80.00")

    def test_pagos_por_dia(self):
        inscripcion = self._inscribir()
        Pago.objects.create(inscripcion=inscripcion, monto=Decimal("100"), metodo=Pago.Metodo.EFECTIVO)

        response = self.client.get("/api/reportes/pagos-por-dia/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["total"], "100.00")
        self.assertEqual(response.data[0]["cantidad"], 1)


class CarnetEndpointTests(AcademiaApiTestCase):
    def setUp(self):
        super().setUp()
        self.inscripcion = self._inscribir()
        self.client.force_authenticate(None)

    def test_carnet_publico(self):
        response = self.client.get(f"/api/carnet/{self.inscripcion.pk}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["codigo_qr"], str(self.inscripcion.pk))
        self.assertEqual(response.data["alumno"]["nombre"], "Lucia Quispe")
        self.assertEqual(response.data["profesor"], "Carlos Huaman")
        self.assertEqual(response.data["saldo"], "180.00")

    def test_carnet_inexistente(self):
        response = self.client.get(f"/api/carnet/{uuid.uuid4()}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_check_in_del_alumno(self):
        response = self.client.post(f"/api/carnet/{self.inscripcion.pk}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["asistencia"]["marcada_por_alumno"])
        self.inscripcion.refresh_from_db()
        self.assertEqual(self.inscripcion.clases_asistidas, 0)


class AutoinscripcionEndpointTests(AcademiaApiTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(None)
        self.url = f"/api/academias/{self.academia.pk}/autoinscripcion/"
        self.datos = {
            "nombre": "Valeria Castro",
            "dni": "72345678",
            "edad": 20,
            "genero": "dama",
            "celular": "987654321",
            "terminos_aceptados": True,
            "curso": self.curso.pk,
            "incluye_matricula": True,
        }

    def test_formulario_lista_cursos_activos(self):
        Curso.objects.create(academia=self.academia, nombre="Cerrado", precio=Decimal("10"), activo=False)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([curso["nombre"] for curso in response.data["cursos"]], ["Salsa"])

    def test_autoinscripcion_con_pago_yape(self):
        self.datos.update({"monto_pago": "50.00", "codigo_pago": "OP-9911"})

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        alumno = Alumno.objects.get(dni="72345678")
        inscripcion = alumno.inscripciones.get()
        self.assertEqual(inscripcion.precio_cobrado, Decimal("180.00"))
        pago = inscripcion.pagos.get()
        self.assertEqual(pago.metodo, Pago.Metodo.YAPE)
        self.assertEqual(pago.codigo, "OP-9911")
        self.assertEqual(response.data["carnet"]["saldo"], "130.00")

    def test_debe_aceptar_terminos(self):
        self.datos["terminos_aceptados"] = False

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("terminos_aceptados", response.data)

    def test_edad_fuera_de_rango(self):
        self.datos["edad"] = 12

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("edad", response.data)

    def test_menor_requiere_apoderado(self):
        self.datos.update({"edad": 16, "es_menor_edad": True})

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("nombre_apoderado", response.data)

    def test_dni_ya_registrado_no_crea_nada(self):
        self.datos["dni"] = self.alumno.dni

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(Inscripcion.objects.exists())

    def test_curso_inexistente_revierte_el_alumno(self):
        self.datos["curso"] = 9999

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Alumno.objects.filter(dni="72345678").exists())

    def test_academia_inexistente(self):
        response = self.client.get("/api/academias/9999/autoinscripcion/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class VoluntarioEndpointTests(AcademiaApiTestCase):
    def setUp(self):
        super().setUp()
        self.voluntario = Voluntario.objects.create(
            academia=self.academia,
            nombre="Carla Ramos",
            dni="45871240",
            comision="Logistica",
        )
        Voluntario.objects.create(academia=self.otra_academia, nombre="Ajeno", dni="45871241", comision="Prensa")

    def test_lista_solo_voluntarios_de_la_academia(self):
        response = self.client.get("/api/voluntarios/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([voluntario["dni"] for voluntario in response.data], ["45871240"])

    def test_crear_voluntario(self):
        response = self.client.post(
            "/api/voluntarios/",
            {"nombre": "Diego Soto", "dni": "45871242", "comision": "Prensa", "talla_polo": "L"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        voluntario = Voluntario.objects.get(dni="45871242")
        self.assertEqual(voluntario.academia, self.academia)
        self.assertEqual(voluntario.registrado_por, "admin@academia.pe")

    def test_dni_duplicado_devuelve_conflicto(self):
        response = self.client.post(
            "/api/voluntarios/",
            {"nombre": "Carla R.", "dni": "45871240", "comision": "Prensa"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_check_in_por_escaneo(self):
        self.client.force_authenticate(self.usuario_profesor)
        url = f"/api/voluntarios/{self.voluntario.pk}/check-in/"

        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["voluntario"]["presente"])
        self.assertEqual(self.client.get("/api/voluntarios/", {"presente": "1"}).data[0]["dni"], "45871240")

        response = self.client.post(url)
        self.assertFalse(response.data["voluntario"]["presente"])

    def test_voluntario_anulado_no_hace_check_in(self):
        response = self.client.post(f"/api/voluntarios/{self.voluntario.pk}/anular/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["voluntario"]["activo"])

        response = self.client.post(f"/api/voluntarios/{self.voluntario.pk}/check-in/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "La inscripción del voluntario está anulada")

    def test_check_in_de_voluntario_ajeno(self):
        ajeno = Voluntario.objects.get(dni="45871241")

        response = self.client.post(f"/api/voluntarios/{ajeno.pk}/check-in/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_solo_admin_elimina_voluntarios(self):
        url = f"/api/voluntarios/{self.voluntario.pk}/"
        self.client.force_authenticate(self.usuario_profesor)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Voluntario.objects.filter(pk=self.voluntario.pk).exists())


class AutoinscripcionVoluntarioEndpointTests(AcademiaApiTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(None)
        self.url = f"/api/academias/{self.academia.pk}/voluntarios/"
        self.datos = {
            "nombre": "Andrea Flores",
            "dni": "72345679",
            "edad": 19,
            "genero": "dama",
            "celular": "987654322",
            "terminos_aceptados": True,
            "comision": "Logistica",
            "talla_polo": "S",
            "metodo_pago": "efectivo",
        }

    def test_registro_publico_y_carnet(self):
        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        voluntario = Voluntario.objects.get(dni="72345679")
        self.assertEqual(voluntario.registrado_por, "autoinscripcion")
        self.assertEqual(response.data["carnet"]["codigo_qr"], str(voluntario.pk))

        carnet = self.client.get(f"/api/carnet/voluntarios/{voluntario.pk}/")
        self.assertEqual(carnet.status_code, status.HTTP_200_OK)
        self.assertEqual(carnet.data["comision"], "Logistica")
        self.assertEqual(carnet.data["academia"], "Academia Danza Lima")
        self.assertFalse(carnet.data["presente"])

    def test_carnet_inexistente(self):
        response = self.client.get(f"/api/carnet/voluntarios/{uuid.uuid4()}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_yape_requiere_comprobante(self):
        self.datos["metodo_pago"] = "yape"

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("comprobante_pago", response.data)

    def test_menor_requiere_apoderado(self):
        self.datos.update({"edad": 15, "es_menor_edad": True})

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("nombre_apoderado", response.data)

    def test_dni_repetido(self):
        self.client.post(self.url, self.datos, format="json")

        response = self.client.post(self.url, self.datos, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["detail"], "Ya existe una inscripción de voluntario con el mismo DNI")

    def test_academia_inexistente(self):
        response = self.client.post("/api/academias/9999/voluntarios/", self.datos, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
