import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.authtoken.models import Token
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from academias.models import Academia
from academias.utils import ROLE_ADMIN, get_academia_for_user
from asistencias.services import (
    listar_inscripciones_activas_por_curso,
    marcar_asistencia_alumno,
    obtener_asistencia_del_dia,
    registrar_asistencia,
)
from cuentas.models import Alumno, Profesor, Voluntario
from cuentas.services import (
    actualizar_alumno,
    actualizar_voluntario,
    anular_voluntario,
    eliminar_alumno,
    eliminar_voluntario,
    obtener_voluntario,
    registrar_alumno,
    registrar_check_in_voluntario,
    registrar_voluntario,
)
from cursos.models import Curso, Horario, Periodo
from gestionacademia.exceptions import NotFoundError, ValidationError, traducir_errores_bd
from gestionacademia.utils import buscar_por_pk
from inscripciones.models import Inscripcion, Pago
from inscripciones.services import (
    CAMPOS_PRECIO,
    actualizar_inscripcion,
    actualizar_pago,
    agregar_pago,
    anular_inscripcion,
    crear_inscripcion,
    eliminar_inscripcion,
    eliminar_pago,
    obtener_inscripcion,
)
from reportes.services import (
    estadisticas_alumno,
    estadisticas_curso,
    historial_asistencia_alumno,
    historial_asistencia_curso,
    pagos_por_dia,
    resumen_academia,
)

from .permissions import EsMiembroAcademia, EscrituraSoloAdmin, role_required
from .serializers import (
    AcademiaSerializer,
    AlumnoSerializer,
    AsistenciaInputSerializer,
    AsistenciaSerializer,
    AutoinscripcionSerializer,
    AutoinscripcionVoluntarioSerializer,
    CarnetSerializer,
    CursoSerializer,
    HistorialAsistenciaSerializer,
    HorarioSerializer,
    InscripcionCreateSerializer,
    InscripcionSerializer,
    InscripcionUpdateSerializer,
    PagoInputSerializer,
    PagoSerializer,
    PagosPorDiaSerializer,
    PeriodoSerializer,
    ProfesorSerializer,
    ResumenAcademiaSerializer,
    RosterSerializer,
    VoluntarioCarnetSerializer,
    VoluntarioSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

REGISTRO_AUTOINSCRIPCION = "autoinscripcion"


def _registrado_por(user):
    return user.email or user.get_username()


def _parse_fecha(valor, campo="fecha"):
    if not valor:
        return None
    try:
        fecha = parse_date(valor)
    except ValueError:
        fecha = None
    if fecha is None:
        raise ValidationError("La fecha no es válida", errores={campo: ["Usa el formato AAAA-MM-DD"]})
    return fecha


def _parse_id(valor, campo):
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError("El filtro no es válido", errores={campo: ["Debe ser un número entero"]})


def _es_verdadero(valor):
    return str(valor).strip().lower() in {"1", "true", "si", "yes"}


class HealthCheckView(APIView):
    """
    Minimal endpoint to check service availability without requiring auth.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        payload = {
            "status": "ok",
            "timestamp": timezone.now(),
        }
        return Response(payload, status=status.HTTP_200_OK)


class AuthenticationViewSet(viewsets.ViewSet):
    """
    Token-based authentication workflow using DRF TokenAuthentication.
    """

    def get_permissions(self):
        if self.action == "login":
            permission_classes = [permissions.AllowAny]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def _build_user_payload(self, user):
        miembro = getattr(user, "miembro_academia", None)
        return {
            "id": user.pk,
            "username": user.get_username(),
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "academia": miembro.academia_id if miembro else None,
            "rol": miembro.rol if miembro else None,
        }

    def _rotate_token(self, user):
        Token.objects.filter(user=user).delete()
        return Token.objects.create(user=user)

    def _unauthorized_response(self):
        return Response(
            {"detail": "Credenciales invalidas."},
            status=status.HTTP_401_UNAUTHORIZED,
        )

    @action(detail=False, methods=["post"], url_path="login")
    def login(self, request):
        username = request.data.get("username")
        password = request.data.get("password")
        email = request.data.get("email")

        if not password:
            raise DRFValidationError({"password": "La contrasena es obligatoria."})

        if not username and email:
            try:
                username = User.objects.get(email=email).get_username()
            except (User.DoesNotExist, User.MultipleObjectsReturned):
                return self._unauthorized_response()

        if not username:
            raise DRFValidationError({"username": "Debes indicar usuario o email."})

        user = authenticate(request, username=username, password=password)
        if user is None or not user.is_active:
            logger.warning("Inicio de sesion fallido para %s", username)
            return self._unauthorized_response()

        token = self._rotate_token(user)
        payload = {
            "token": token.key,
            "user": self._build_user_payload(user),
        }
        return Response(payload, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="refresh")
    def refresh(self, request):
        if request.auth is None:
            return Response(
                {"detail": "Token no encontrado."},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        new_token = self._rotate_token(request.user)
        return Response(
            {"token": new_token.key},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="logout")
    def logout(self, request):
        token = request.auth
        if token:
            token.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class AcademiaScopedMixin:
    """Restringe la vista a la academia del usuario autenticado."""

    permission_classes = [permissions.IsAuthenticated, EsMiembroAcademia]
    campo_academia = "academia"

    def get_academia(self):
        if not hasattr(self, "_academia"):
            self._academia = get_academia_for_user(self.request.user)
        return self._academia

    def get_queryset(self):
        return super().get_queryset().filter(**{self.campo_academia: self.get_academia()})

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["academia"] = self.get_academia()
        return context

    def perform_create(self, serializer):
        serializer.save(academia=self.get_academia())


class AcademiaView(APIView):
    permission_classes = [permissions.IsAuthenticated, EsMiembroAcademia]

    def get_permissions(self):
        permisos = super().get_permissions()
        if self.request.method == "PATCH":
            permisos.append(role_required(ROLE_ADMIN)())
        return permisos

    def get(self, request):
        academia = get_academia_for_user(request.user)
        return Response(AcademiaSerializer(academia).data)

    def patch(self, request):
        academia = get_academia_for_user(request.user)
        serializer = AcademiaSerializer(academia, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Academia %s actualizada por %s", academia.pk, _registrado_por(request.user))
        return Response({"mensaje": "Academia actualizada", "academia": serializer.data})


class AlumnoViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Alumno.objects.all()
    serializer_class = AlumnoSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        termino = self.request.query_params.get("q")
        if termino:
            qs = qs.filter(Q(nombre__icontains=termino) | Q(dni__icontains=termino))
        return qs

    def perform_create(self, serializer):
        serializer.instance = registrar_alumno(
            self.get_academia(),
            registrado_por=_registrado_por(self.request.user),
            **serializer.validated_data,
        )

    def perform_update(self, serializer):
        serializer.instance = actualizar_alumno(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        eliminar_alumno(instance)

    @action(detail=True, methods=["get"])
    def estadisticas(self, request, pk=None):
        return Response(estadisticas_alumno(self.get_object()))

    @action(detail=True, methods=["get"])
    def asistencias(self, request, pk=None):
        historial = historial_asistencia_alumno(self.get_object())
        return Response(HistorialAsistenciaSerializer(historial, many=True).data)

    @action(detail=True, methods=["get"])
    def inscripciones(self, request, pk=None):
        alumno = self.get_object()
        qs = alumno.inscripciones.select_related("curso", "curso__horario", "curso__profesor").prefetch_related("pagos")
        return Response(InscripcionSerializer(qs, many=True).data)


class ProfesorViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Profesor.objects.all()
    serializer_class = ProfesorSerializer
    permission_classes = AcademiaScopedMixin.permission_classes + [EscrituraSoloAdmin]


class HorarioViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Horario.objects.order_by("hora_inicio")
    serializer_class = HorarioSerializer
    permission_classes = AcademiaScopedMixin.permission_classes + [EscrituraSoloAdmin]


class PeriodoViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Periodo.objects.order_by("-fecha_inicio")
    serializer_class = PeriodoSerializer
    permission_classes = AcademiaScopedMixin.permission_classes + [EscrituraSoloAdmin]


class CursoViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Curso.objects.select_related("horario", "profesor").order_by("nombre")
    serializer_class = CursoSerializer
    permission_classes = AcademiaScopedMixin.permission_classes + [EscrituraSoloAdmin]

    def get_queryset(self):
        qs = super().get_queryset()
        activo = self.request.query_params.get("activo")
        if activo is not None:
            qs = qs.filter(activo=_es_verdadero(activo))
        return qs

    def perform_destroy(self, instance):
        with traducir_errores_bd(
            "El curso no se pudo eliminar",
            "El curso tiene inscripciones y no se puede eliminar",
        ), transaction.atomic():
            instance.delete()

    @action(detail=True, methods=["get"], url_path="inscripciones-activas")
    def inscripciones_activas(self, request, pk=None):
        fecha = _parse_fecha(request.query_params.get("fecha"))
        filas = listar_inscripciones_activas_por_curso(pk, fecha=fecha, academia=self.get_academia())
        return Response(RosterSerializer(filas, many=True).data)

    @action(detail=True, methods=["get"])
    def estadisticas(self, request, pk=None):
        return Response(estadisticas_curso(self.get_object()))

    @action(detail=True, methods=["get"])
    def asistencias(self, request, pk=None):
        historial = historial_asistencia_curso(self.get_object())
        return Response(HistorialAsistenciaSerializer(historial, many=True).data)


class InscripcionViewSet(
    AcademiaScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Inscripcion.objects.select_related(
        "alumno",
        "curso",
        "curso__horario",
        "curso__profesor",
    ).prefetch_related("pagos")
    serializer_class = InscripcionSerializer
    campo_academia = "curso__academia"

    def get_permissions(self):
        permisos = super().get_permissions()
        if self.action == "destroy" and _es_verdadero(self.request.query_params.get("definitivo", "")):
            permisos.append(role_required(ROLE_ADMIN)())
        return permisos

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        if params.get("alumno"):
            qs = qs.filter(alumno_id=_parse_id(params["alumno"], "alumno"))
        if params.get("curso"):
            qs = qs.filter(curso_id=_parse_id(params["curso"], "curso"))
        if params.get("activa") is not None:
            qs = qs.filter(activa=_es_verdadero(params["activa"]))
        return qs

    def _respuesta(self, inscripcion, mensaje, status_code=status.HTTP_200_OK):
        inscripcion = self.get_queryset().get(pk=inscripcion.pk)
        return Response(
            {"mensaje": mensaje, "inscripcion": InscripcionSerializer(inscripcion).data},
            status=status_code,
        )

    def create(self, request):
        serializer = InscripcionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data
        inscripcion = crear_inscripcion(
            alumno_id=datos["alumno"],
            curso_id=datos["curso"],
            incluye_matricula=datos["incluye_matricula"],
            registrado_por=_registrado_por(request.user),
            total_clases=datos.get("total_clases"),
            precio_personalizado=datos.get("precio_personalizado"),
            periodo_id=datos.get("periodo"),
            fecha_inicio=datos.get("fecha_inicio"),
            fecha_fin=datos.get("fecha_fin"),
            academia=self.get_academia(),
        )
        return self._respuesta(inscripcion, "Inscripción creada", status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = InscripcionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        cambios = dict(serializer.validated_data)
        if "periodo" in cambios:
            cambios["periodo_id"] = cambios.pop("periodo")
        cambios.update({campo: request.data[campo] for campo in CAMPOS_PRECIO if campo in request.data})
        inscripcion = actualizar_inscripcion(pk, academia=self.get_academia(), **cambios)
        return self._respuesta(inscripcion, "Inscripción actualizada")

    def destroy(self, request, pk=None):
        if _es_verdadero(request.query_params.get("definitivo", "")):
            eliminar_inscripcion(pk, academia=self.get_academia())
            return Response(status=status.HTTP_204_NO_CONTENT)
        inscripcion = anular_inscripcion(pk, academia=self.get_academia())
        return self._respuesta(inscripcion, "Inscripción anulada")

    @action(detail=True, methods=["post"])
    def pagos(self, request, pk=None):
        serializer = PagoInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data
        pago = agregar_pago(
            pk,
            monto=datos["monto"],
            metodo=datos["metodo"],
            codigo=datos.get("codigo", ""),
            registrado_por=_registrado_por(request.user),
            comprobante=datos.get("comprobante"),
            academia=self.get_academia(),
        )
        respuesta = self._respuesta(pago.inscripcion, "Pago registrado", status.HTTP_201_CREATED)
        respuesta.data["pago"] = PagoSerializer(pago).data
        return respuesta

    @action(detail=True, methods=["patch", "delete"], url_path=r"pagos/(?P<pago_id>[^/.]+)")
    def pago(self, request, pk=None, pago_id=None):
        academia = self.get_academia()
        if request.method == "DELETE":
            eliminado = eliminar_pago(pk, pago_id, academia=academia)
            inscripcion = obtener_inscripcion(pk, academia=academia)
            mensaje = "Pago eliminado" if eliminado else "El pago no existe, no se realizaron cambios"
            return self._respuesta(inscripcion, mensaje)

        serializer = PagoInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        pago = actualizar_pago(pk, pago_id, academia=academia, **serializer.validated_data)
        inscripcion = obtener_inscripcion(pk, academia=academia)
        if pago is None:
            return self._respuesta(inscripcion, "El pago no existe, no se realizaron cambios")
        respuesta = self._respuesta(inscripcion, "Pago actualizado")
        respuesta.data["pago"] = PagoSerializer(pago).data
        return respuesta

    @action(detail=True, methods=["get", "post"])
    def asistencia(self, request, pk=None):
        academia = self.get_academia()
        if request.method == "GET":
            fecha = _parse_fecha(request.query_params.get("fecha"))
            inscripcion = obtener_inscripcion(pk, academia=academia)
            asistencia = obtener_asistencia_del_dia(inscripcion.pk, fecha)
            return Response(
                {
                    "asistencia": AsistenciaSerializer(asistencia).data if asistencia else None,
                    "clases_asistidas": inscripcion.clases_asistidas,
                    "total_clases": inscripcion.total_clases,
                }
            )

        serializer = AsistenciaInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data
        profesor_id = datos.get("profesor")
        if profesor_id is None:
            profesor = getattr(request.user, "profesor", None)
            profesor_id = profesor.pk if profesor else None
        asistencia = registrar_asistencia(
            pk,
            profesor_id,
            fecha=datos.get("fecha"),
            marcada_por_alumno=datos.get("marcada_por_alumno"),
            confirmada_por_admin=datos.get("confirmada_por_admin"),
            academia=academia,
        )
        return Response(
            {
                "mensaje": "Asistencia actualizada",
                "asistencia": AsistenciaSerializer(asistencia).data,
                "clases_asistidas": asistencia.inscripcion.clases_asistidas,
                "total_clases": asistencia.inscripcion.total_clases,
            }
        )


class VoluntarioViewSet(AcademiaScopedMixin, viewsets.ModelViewSet):
    queryset = Voluntario.objects.all()
    serializer_class = VoluntarioSerializer

    def get_permissions(self):
        permisos = super().get_permissions()
        if self.action == "destroy":
            permisos.append(role_required(ROLE_ADMIN)())
        return permisos

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        termino = params.get("q")
        if termino:
            qs = qs.filter(Q(nombre__icontains=termino) | Q(dni__icontains=termino))
        if params.get("comision"):
            qs = qs.filter(comision__iexact=params["comision"])
        if params.get("presente") is not None:
            qs = qs.filter(presente=_es_verdadero(params["presente"]))
        return qs

    def perform_create(self, serializer):
        serializer.instance = registrar_voluntario(
            self.get_academia(),
            registrado_por=_registrado_por(self.request.user),
            **serializer.validated_data,
        )

    def perform_update(self, serializer):
        serializer.instance = actualizar_voluntario(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        eliminar_voluntario(instance)

    @action(detail=True, methods=["post"], url_path="check-in")
    def check_in(self, request, pk=None):
        voluntario = registrar_check_in_voluntario(pk, academia=self.get_academia())
        mensaje = "Check-in registrado" if voluntario.presente else "Check-in anulado"
        return Response({"mensaje": mensaje, "voluntario": VoluntarioSerializer(voluntario).data})

    @action(detail=True, methods=["post"])
    def anular(self, request, pk=None):
        voluntario = anular_voluntario(self.get_object())
        return Response(
            {"mensaje": "Inscripción de voluntario anulada", "voluntario": VoluntarioSerializer(voluntario).data}
        )


class ReportePagosPorDiaView(APIView):
    permission_classes = [permissions.IsAuthenticated, EsMiembroAcademia]

    def get(self, request):
        desde = _parse_fecha(request.query_params.get("desde"), "desde")
        hasta = _parse_fecha(request.query_params.get("hasta"), "hasta")
        dias = pagos_por_dia(get_academia_for_user(request.user), desde=desde, hasta=hasta)
        return Response(PagosPorDiaSerializer(dias, many=True).data)


class ReporteResumenView(APIView):
    permission_classes = [permissions.IsAuthenticated, EsMiembroAcademia]

    def get(self, request):
        resumen = resumen_academia(get_academia_for_user(request.user))
        return Response(ResumenAcademiaSerializer(resumen).data)


class CarnetView(APIView):
    """
    Carnet publico de una inscripcion. El id de la inscripcion va en el QR.

    ``POST`` registra el check-in del propio alumno para el dia; no cambia el
    conteo de clases.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def _obtener(self, inscripcion_id):
        qs = Inscripcion.objects.select_related(
            "alumno",
            "curso",
            "curso__academia",
            "curso__horario",
            "curso__profesor",
        )
        inscripcion = buscar_por_pk(qs, inscripcion_id)
        if inscripcion is None:
            raise NotFoundError("Carnet no encontrado")
        return inscripcion

    def get(self, request, inscripcion_id):
        return Response(CarnetSerializer(self._obtener(inscripcion_id)).data)

    def post(self, request, inscripcion_id):
        asistencia = marcar_asistencia_alumno(inscripcion_id)
        return Response(
            {"mensaje": "Asistencia marcada", "asistencia": AsistenciaSerializer(asistencia).data},
            status=status.HTTP_200_OK,
        )


class AutoinscripcionView(APIView):
    """
    Formulario publico para que un alumno se inscriba solo.

    Alumno, inscripcion y primer pago por Yape se guardan juntos o no se
    guarda nada.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def _obtener_academia(self, academia_id):
        academia = buscar_por_pk(Academia.objects.all(), academia_id)
        if academia is None:
            raise NotFoundError("Academia no encontrada")
        return academia

    def get(self, request, academia_id):
        academia = self._obtener_academia(academia_id)
        cursos = academia.cursos.filter(activo=True).select_related("horario", "profesor").order_by("nombre")
        return Response(
            {
                "academia": AcademiaSerializer(academia).data,
                "cursos": CursoSerializer(cursos, many=True).data,
            }
        )

    def post(self, request, academia_id):
        academia = self._obtener_academia(academia_id)
        serializer = AutoinscripcionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = dict(serializer.validated_data)
        curso_id = datos.pop("curso")
        incluye_matricula = datos.pop("incluye_matricula") and academia.tiene_matricula
        monto_pago = datos.pop("monto_pago", None)
        codigo_pago = datos.pop("codigo_pago", "")
        comprobante_pago = datos.pop("comprobante_pago", None)

        with transaction.atomic():
            alumno = registrar_alumno(academia, registrado_por=REGISTRO_AUTOINSCRIPCION, **datos)
            inscripcion = crear_inscripcion(
                alumno_id=alumno.pk,
                curso_id=curso_id,
                incluye_matricula=incluye_matricula,
                registrado_por=REGISTRO_AUTOINSCRIPCION,
                academia=academia,
            )
            if monto_pago:
                agregar_pago(
                    inscripcion.pk,
                    monto=monto_pago,
                    metodo=Pago.Metodo.YAPE,
                    codigo=codigo_pago,
                    registrado_por=REGISTRO_AUTOINSCRIPCION,
                    comprobante=comprobante_pago,
                    academia=academia,
                )
        logger.info("Autoinscripcion de alumno %s en inscripcion %s", alumno.pk, inscripcion.pk)
        return Response(
            {
                "mensaje": "Inscripción registrada",
                "carnet": CarnetSerializer(self._recargar(inscripcion)).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def _recargar(self, inscripcion):
        return Inscripcion.objects.select_related(
            "alumno",
            "curso",
            "curso__academia",
            "curso__horario",
            "curso__profesor",
        ).get(pk=inscripcion.pk)


class VoluntarioCarnetView(APIView):
    """Carnet publico del voluntario; el QR lleva su id y el check-in lo hace el staff."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request, voluntario_id):
        return Response(VoluntarioCarnetSerializer(obtener_voluntario(voluntario_id)).data)


class AutoinscripcionVoluntarioView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def _obtener_academia(self, academia_id):
        academia = buscar_por_pk(Academia.objects.all(), academia_id)
        if academia is None:
            raise NotFoundError("Academia no encontrada")
        return academia

    def get(self, request, academia_id):
        return Response({"academia": AcademiaSerializer(self._obtener_academia(academia_id)).data})

    def post(self, request, academia_id):
        academia = self._obtener_academia(academia_id)
        serializer = AutoinscripcionVoluntarioSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        voluntario = registrar_voluntario(
            academia,
            registrado_por=REGISTRO_AUTOINSCRIPCION,
            **serializer.validated_data,
        )
        return Response(
            {"mensaje": "Registro de voluntario completado", "carnet": VoluntarioCarnetSerializer(voluntario).data},
            status=status.HTTP_201_CREATED,
        )
