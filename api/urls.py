from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AcademiaView,
    AlumnoViewSet,
    AuthenticationViewSet,
    AutoinscripcionView,
    AutoinscripcionVoluntarioView,
    CarnetView,
    CursoViewSet,
    HealthCheckView,
    HorarioViewSet,
    InscripcionViewSet,
    PeriodoViewSet,
    ProfesorViewSet,
    ReportePagosPorDiaView,
    ReporteResumenView,
    VoluntarioCarnetView,
    VoluntarioViewSet,
)

router = DefaultRouter()
router.register(r"auth", AuthenticationViewSet, basename="auth")
router.register(r"alumnos", AlumnoViewSet, basename="alumnos")
router.register(r"profesores", ProfesorViewSet, basename="profesores")
router.register(r"horarios", HorarioViewSet, basename="horarios")
router.register(r"periodos", PeriodoViewSet, basename="periodos")
router.register(r"cursos", CursoViewSet, basename="cursos")
router.register(r"inscripciones", InscripcionViewSet, basename="inscripciones")
router.register(r"voluntarios", VoluntarioViewSet, basename="voluntarios")

urlpatterns = [
    path("health/", HealthCheckView.as_view(), name="api-health"),
    path("academia/", AcademiaView.as_view(), name="api-academia"),
    path("reportes/resumen/", ReporteResumenView.as_view(), name="api-reportes-resumen"),
    path("reportes/pagos-por-dia/", ReportePagosPorDiaView.as_view(), name="api-reportes-pagos-por-dia"),
    path("carnet/<uuid:inscripcion_id>/", CarnetView.as_view(), name="api-carnet"),
    path(
        "academias/<int:academia_id>/autoinscripcion/",
        AutoinscripcionView.as_view(),
        name="api-autoinscripcion",
    ),
    path(
        "carnet/voluntarios/<uuid:voluntario_id>/",
        VoluntarioCarnetView.as_view(),
        name="api-carnet-voluntario",
    ),
    path(
        "academias/<int:academia_id>/voluntarios/",
        AutoinscripcionVoluntarioView.as_view(),
        name="api-autoinscripcion-voluntario",
    ),
    path("", include(router.urls)),
]
