"""
Registro diario de asistencias y conciliacion del contador ``clases_asistidas``.

Solo la confirmacion del administrador mueve el contador: false -> true suma
una clase, true -> false la resta. El delta se calcula siempre contra la fila
guardada, dentro de la misma transaccion que actualiza contador y asistencia.
"""

import logging

from django.db import transaction
from django.db.models import F, IntegerField, Prefetch, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from cuentas.models import Profesor
from cursos.models import Curso
from gestionacademia.exceptions import NotFoundError, ValidationError, traducir_errores_bd
from gestionacademia.utils import buscar_por_pk
from inscripciones.models import Inscripcion
from inscripciones.services import obtener_inscripcion

from .models import Asistencia

logger = logging.getLogger(__name__)


def calcular_delta(admin_anterior, admin_nuevo):
    if admin_nuevo is None:
        return 0
    anterior = bool(admin_anterior)
    if admin_nuevo and not anterior:
        return 1
    if anterior and not admin_nuevo:
        return -1
    return 0


def incrementar_clases_asistidas(inscripcion_id, incremento):
    """Suma ``incremento`` (puede ser negativo) sin bajar de cero, en un solo UPDATE."""
    with traducir_errores_bd("No se pudo actualizar el conteo de clases"):
        actualizadas = Inscripcion.objects.filter(pk=inscripcion_id).update(
            clases_asistidas=Greatest(
                F("clases_asistidas") + Value(incremento),
                Value(0),
                output_field=IntegerField(),
            ),
        )
    if not actualizadas:
        raise NotFoundError("Inscripción no encontrada")


def obtener_asistencia_del_dia(inscripcion_id, fecha=None):
    fecha = fecha or timezone.localdate()
    return buscar_asistencia(inscripcion_id, fecha)


def buscar_asistencia(inscripcion_id, fecha, for_update=False):
    qs = Asistencia.objects.filter(inscripcion_id=inscripcion_id, fecha=fecha)
    if for_update:
        qs = qs.select_for_update()
    return qs.first()


def _validar_activa(inscripcion):
    if not inscripcion.activa:
        raise ValidationError("La inscripción no está activa")


def registrar_asistencia(
    inscripcion_id,
    profesor_id,
    fecha=None,
    marcada_por_alumno=None,
    confirmada_por_admin=None,
    academia=None,
):
    """Marca la asistencia del dia desde administracion.

    Los checks en ``None`` conservan su valor anterior (``False`` si la fila
    no existia). Repetir la misma confirmacion no vuelve a mover el contador.
    """
    fecha = fecha or timezone.localdate()
    with traducir_errores_bd("La asistencia no se pudo confirmar"), transaction.atomic():
        inscripcion = obtener_inscripcion(inscripcion_id, academia=academia, for_update=True)
        _validar_activa(inscripcion)
        profesor = buscar_por_pk(
            Profesor.objects.filter(academia_id=inscripcion.curso.academia_id),
            profesor_id,
        )
        if profesor is None:
            raise ValidationError(
                "No se proporcionó un profesor válido",
                errores={"profesor": ["El profesor seleccionado no existe"]},
            )

        asistencia = buscar_asistencia(inscripcion.pk, fecha, for_update=True)
        anterior = asistencia.confirmada_por_admin if asistencia else None
        delta = calcular_delta(anterior, confirmada_por_admin)
        if delta:
            incrementar_clases_asistidas(inscripcion.pk, delta)

        if asistencia is None:
            asistencia = Asistencia(inscripcion=inscripcion, fecha=fecha, registrada_en=timezone.now())
        asistencia.profesor = profesor
        if marcada_por_alumno is not None:
            asistencia.marcada_por_alumno = marcada_por_alumno
        if confirmada_por_admin is not None:
            asistencia.confirmada_por_admin = confirmada_por_admin
        asistencia.save()

    inscripcion.refresh_from_db(fields=["clases_asistidas"])
    asistencia.inscripcion = inscripcion
    logger.info(
        "Asistencia %s de inscripcion %s (%s): delta=%s clases_asistidas=%s",
        asistencia.pk,
        inscripcion.pk,
        fecha,
        delta,
        inscripcion.clases_asistidas,
    )
    return asistencia


def marcar_asistencia_alumno(inscripcion_id, fecha=None, academia=None):
    """Confirmacion del propio alumno (check-in por QR); no altera el contador."""
    fecha = fecha or timezone.localdate()
    with traducir_errores_bd("La asistencia no se pudo marcar"), transaction.atomic():
        inscripcion = obtener_inscripcion(inscripcion_id, academia=academia, for_update=True)
        _validar_activa(inscripcion)
        asistencia = buscar_asistencia(inscripcion.pk, fecha, for_update=True)
        if asistencia is None:
            asistencia = Asistencia(inscripcion=inscripcion, fecha=fecha, registrada_en=timezone.now())
        asistencia.marcada_por_alumno = True
        asistencia.save()
    logger.info("Alumno marco asistencia %s en inscripcion %s", asistencia.pk, inscripcion.pk)
    return asistencia


def _fila_roster(inscripcion):
    asistencia = inscripcion.asistencias_del_dia[0] if inscripcion.asistencias_del_dia else None
    alumno = inscripcion.alumno
    return {
        "id": inscripcion.pk,
        "curso_id": inscripcion.curso_id,
        "alumno_id": inscripcion.alumno_id,
        "clases_asistidas": inscripcion.clases_asistidas,
        "total_clases": inscripcion.total_clases,
        "creada_en": inscripcion.creada_en,
        "asistencia": {
            "id": asistencia.pk if asistencia else None,
            "registrada_en": asistencia.registrada_en if asistencia else None,
            "marcada_por_alumno": asistencia.marcada_por_alumno if asistencia else False,
            "confirmada_por_admin": asistencia.confirmada_por_admin if asistencia else False,
            "reprogramada": asistencia.reprogramada if asistencia else False,
            "profesor_id": asistencia.profesor_id if asistencia else None,
            "tiene_asistencia": asistencia is not None,
        },
        "alumno": {
            "id": alumno.pk,
            "nombre": alumno.nombre,
            "dni": alumno.dni,
        },
    }


def listar_inscripciones_activas_por_curso(curso_id, fecha=None, academia=None):
    cursos = Curso.objects.all()
    if academia is not None:
        cursos = cursos.filter(academia=academia)
    curso = buscar_por_pk(cursos, curso_id)
    if curso is None:
        raise NotFoundError("Curso no encontrado")
    fecha = fecha or timezone.localdate()
    inscripciones = (
        Inscripcion.objects.filter(curso=curso, activa=True)
        .select_related("alumno")
        .prefetch_related(
            Prefetch(
                "asistencias",
                queryset=Asistencia.objects.filter(fecha=fecha),
                to_attr="asistencias_del_dia",
            )
        )
        .order_by("alumno__nombre")
    )
    return [_fila_roster(inscripcion) for inscripcion in inscripciones]
