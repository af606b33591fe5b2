from decimal import Decimal

from django.db.models import Count, Prefetch, Q, Sum
from django.utils import timezone

from asistencias.models import Asistencia
from cuentas.models import Alumno
from inscripciones.models import Inscripcion, Pago


def pagos_por_dia(academia, desde=None, hasta=None):
    """Agrupa los pagos de la academia por dia local, ordenados por fecha."""
    pagos = (
        Pago.objects.filter(inscripcion__curso__academia=academia)
        .only("monto", "metodo", "codigo", "registrado_por", "registrado_en")
        .order_by("registrado_en")
    )
    if desde:
        pagos = pagos.filter(registrado_en__date__gte=desde)
    if hasta:
        pagos = pagos.filter(registrado_en__date__lte=hasta)

    por_fecha = {}
    for pago in pagos:
        fecha = timezone.localdate(pago.registrado_en)
        dia = por_fecha.setdefault(
            fecha,
            {"fecha": fecha, "total": Decimal("0"), "cantidad": 0, "pagos": []},
        )
        dia["total"] += pago.monto
        dia["cantidad"] += 1
        dia["pagos"].append(
            {
                "monto": pago.monto,
                "metodo": pago.metodo,
                "codigo": pago.codigo,
                "registrado_por": pago.registrado_por,
            }
        )
    return [por_fecha[fecha] for fecha in sorted(por_fecha)]


def _inscripciones_con_asistencias(filtro):
    confirmadas = Asistencia.objects.filter(confirmada_por_admin=True).order_by("-fecha")
    return (
        Inscripcion.objects.filter(**filtro)
        .select_related("alumno", "curso")
        .prefetch_related(Prefetch("asistencias", queryset=confirmadas, to_attr="asistencias_confirmadas"))
    )


def _historial(inscripcion):
    return {
        "inscripcion": inscripcion,
        "clases_asistidas": inscripcion.clases_asistidas,
        "total_clases": inscripcion.total_clases,
        "porcentaje_avance": inscripcion.porcentaje_avance(),
        "asistencias": inscripcion.asistencias_confirmadas,
    }


def historial_asistencia_alumno(alumno):
    inscripciones = _inscripciones_con_asistencias({"alumno": alumno}).order_by("-fecha_inicio", "-creada_en")
    return [_historial(inscripcion) for inscripcion in inscripciones]


def historial_asistencia_curso(curso):
    inscripciones = _inscripciones_con_asistencias({"curso": curso}).order_by("-creada_en")
    return [_historial(inscripcion) for inscripcion in inscripciones]


def estadisticas_curso(curso):
    return {
        "total_inscripciones": Inscripcion.objects.filter(curso=curso).count(),
        "total_asistencias": Asistencia.objects.filter(
            inscripcion__curso=curso,
            confirmada_por_admin=True,
        ).count(),
    }


def estadisticas_alumno(alumno):
    return {"total_inscripciones": alumno.inscripciones.count()}


def resumen_academia(academia):
    inscripciones = Inscripcion.objects.filter(curso__academia=academia)
    totales = inscripciones.aggregate(
        activas=Count("id", filter=Q(activa=True)),
        total_cobrado=Sum("precio_cobrado"),
    )
    total_pagado = (
        Pago.objects.filter(inscripcion__curso__academia=academia).aggregate(total=Sum("monto"))["total"]
        or Decimal("0")
    )
    total_cobrado = totales["total_cobrado"] or Decimal("0")
    return {
        "total_alumnos": Alumno.objects.filter(academia=academia).count(),
        "inscripciones_activas": totales["activas"],
        "asistencias_confirmadas": Asistencia.objects.filter(
            inscripcion__curso__academia=academia,
            confirmada_por_admin=True,
        ).count(),
        "total_cobrado": total_cobrado,
        "total_pagado": total_pagado,
        "saldo_pendiente": total_cobrado - total_pagado,
    }
