"""
Reglas de cobro de las inscripciones.

Al inscribir se guarda una foto del precio (curso + matricula) que no cambia
aunque luego se edite el precio del curso. Los pagos son filas propias de la
inscripcion: agregar o quitar uno es un solo INSERT/DELETE, sin reescribir la
lista completa.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db import transaction

from cuentas.models import Alumno
from cursos.models import Curso, Periodo
from gestionacademia.exceptions import NotFoundError, ValidationError, traducir_errores_bd, validar_modelo
from gestionacademia.utils import buscar_por_pk

from .models import Inscripcion, Pago

logger = logging.getLogger(__name__)

CENTAVOS = Decimal("0.01")
CAMPOS_INSCRIPCION_EDITABLES = ("periodo_id", "fecha_inicio", "fecha_fin", "total_clases", "activa")
CAMPOS_PRECIO = ("precio_curso", "precio_matricula", "precio_cobrado", "incluye_matricula")
CAMPOS_PAGO_EDITABLES = ("monto", "metodo", "codigo", "comprobante", "registrado_por")


@dataclass(frozen=True)
class CargoInscripcion:
    precio_curso: Decimal
    precio_matricula: Decimal
    precio_cobrado: Decimal


def _a_monto(valor, campo, mensaje):
    try:
        monto = Decimal(str(valor)).quantize(CENTAVOS)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(mensaje, errores={campo: ["Ingresa un monto válido"]})
    if not monto.is_finite() or monto < 0:
        raise ValidationError(mensaje, errores={campo: ["El monto debe ser mayor o igual a 0"]})
    return monto


def _a_total_clases(valor, mensaje):
    try:
        total = int(valor)
    except (ValueError, TypeError):
        total = 0
    if total < 1:
        raise ValidationError(mensaje, errores={"total_clases": ["Debe haber al menos 1 clase"]})
    return total


def calcular_cargo(curso, academia, incluye_matricula, precio_personalizado=None):
    if precio_personalizado is None:
        precio_curso = Decimal(curso.precio).quantize(CENTAVOS)
    else:
        precio_curso = _a_monto(
            precio_personalizado,
            "precio_personalizado",
            "El precio personalizado no es válido",
        )
    if incluye_matricula:
        precio_matricula = Decimal(academia.precio_matricula).quantize(CENTAVOS)
    else:
        precio_matricula = Decimal("0.00")
    return CargoInscripcion(
        precio_curso=precio_curso,
        precio_matricula=precio_matricula,
        precio_cobrado=precio_curso + precio_matricula,
    )


def obtener_inscripcion(inscripcion_id, academia=None, for_update=False):
    qs = Inscripcion.objects.select_related("alumno", "curso", "curso__academia")
    if academia is not None:
        qs = qs.filter(curso__academia=academia)
    if for_update:
        qs = qs.select_for_update(of=("self",))
    inscripcion = buscar_por_pk(qs, inscripcion_id)
    if inscripcion is None:
        raise NotFoundError("Inscripción no encontrada")
    return inscripcion


def crear_inscripcion(
    alumno_id,
    curso_id,
    incluye_matricula=False,
    registrado_por="",
    total_clases=None,
    precio_personalizado=None,
    periodo_id=None,
    fecha_inicio=None,
    fecha_fin=None,
    academia=None,
):
    mensaje = "La inscripcion no se pudo crear, verifica que los datos sean correctos"
    cursos = Curso.objects.select_related("academia")
    if academia is not None:
        cursos = cursos.filter(academia=academia)
    curso = buscar_por_pk(cursos, curso_id)
    if curso is None:
        raise ValidationError(mensaje, errores={"curso": ["El curso seleccionado no existe"]})
    if not curso.activo:
        raise ValidationError(mensaje, errores={"curso": ["El curso no está disponible"]})

    alumno = buscar_por_pk(Alumno.objects.all(), alumno_id)
    if alumno is None:
        raise ValidationError(mensaje, errores={"alumno": ["El alumno seleccionado no existe"]})
    if alumno.academia_id != curso.academia_id:
        raise ValidationError(mensaje, errores={"alumno": ["El alumno no pertenece a la academia del curso"]})

    periodo = None
    if periodo_id not in (None, ""):
        periodo = buscar_por_pk(Periodo.objects.filter(academia_id=curso.academia_id), periodo_id)
        if periodo is None:
            raise ValidationError(mensaje, errores={"periodo": ["El periodo seleccionado no existe"]})
        fecha_inicio = fecha_inicio or periodo.fecha_inicio
        fecha_fin = fecha_fin or periodo.fecha_fin
    if fecha_inicio and fecha_fin and fecha_fin < fecha_inicio:
        raise ValidationError(mensaje, errores={"fecha_fin": ["La fecha de fin no puede ser anterior a la de inicio"]})

    es_personalizada = total_clases is not None or precio_personalizado is not None
    if total_clases is None:
        total_clases = curso.total_clases
    else:
        total_clases = _a_total_clases(total_clases, mensaje)

    cargo = calcular_cargo(curso, curso.academia, incluye_matricula, precio_personalizado)
    inscripcion = Inscripcion(
        alumno=alumno,
        curso=curso,
        periodo=periodo,
        fecha_inicio=fecha_inicio,
        fecha_fin=fecha_fin,
        precio_curso=cargo.precio_curso,
        precio_matricula=cargo.precio_matricula,
        precio_cobrado=cargo.precio_cobrado,
        incluye_matricula=bool(incluye_matricula),
        es_personalizada=es_personalizada,
        total_clases=total_clases,
        registrado_por=registrado_por or "",
    )
    validar_modelo(inscripcion, mensaje)
    with traducir_errores_bd("La inscripcion no se pudo crear"), transaction.atomic():
        inscripcion.save()
    logger.info(
        "Inscripcion %s creada: alumno=%s curso=%s cobrado=%s",
        inscripcion.pk,
        alumno.pk,
        curso.pk,
        inscripcion.precio_cobrado,
    )
    return inscripcion


def actualizar_inscripcion(inscripcion_id, academia=None, **cambios):
    mensaje = "La inscripcion no se pudo actualizar, verifica que los datos sean correctos"
    if any(campo in cambios for campo in CAMPOS_PRECIO):
        raise ValidationError("Los precios de una inscripción no se pueden modificar")
    desconocidos = set(cambios) - set(CAMPOS_INSCRIPCION_EDITABLES)
    if desconocidos:
        raise ValidationError(mensaje, errores={campo: ["Campo no editable"] for campo in sorted(desconocidos)})

    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    if "periodo_id" in cambios:
        periodo_id = cambios.pop("periodo_id")
        periodo = None
        if periodo_id not in (None, ""):
            periodo = buscar_por_pk(Periodo.objects.filter(academia_id=inscripcion.curso.academia_id), periodo_id)
            if periodo is None:
                raise ValidationError(mensaje, errores={"periodo": ["El periodo seleccionado no existe"]})
        inscripcion.periodo = periodo
    if "total_clases" in cambios:
        total_clases = _a_total_clases(cambios.pop("total_clases"), mensaje)
        if total_clases != inscripcion.total_clases:
            inscripcion.total_clases = total_clases
            inscripcion.es_personalizada = True
    for campo, valor in cambios.items():
        setattr(inscripcion, campo, valor)
    if inscripcion.fecha_inicio and inscripcion.fecha_fin and inscripcion.fecha_fin < inscripcion.fecha_inicio:
        raise ValidationError(mensaje, errores={"fecha_fin": ["La fecha de fin no puede ser anterior a la de inicio"]})

    validar_modelo(inscripcion, mensaje)
    with traducir_errores_bd("La inscripcion no se pudo actualizar"), transaction.atomic():
        inscripcion.save()
    return inscripcion


def anular_inscripcion(inscripcion_id, academia=None):
    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    if inscripcion.activa:
        inscripcion.activa = False
        with traducir_errores_bd("La inscripcion no se pudo anular"):
            inscripcion.save(update_fields=["activa", "actualizada_en"])
        logger.info("Inscripcion %s anulada", inscripcion.pk)
    return inscripcion


def eliminar_inscripcion(inscripcion_id, academia=None):
    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    comprobantes = [pago.comprobante for pago in inscripcion.pagos.all() if pago.comprobante]
    with traducir_errores_bd("La inscripcion no se pudo eliminar"), transaction.atomic():
        inscripcion.delete()
    for archivo in comprobantes:
        archivo.delete(save=False)
    logger.info("Inscripcion %s eliminada", inscripcion_id)


def _validar_metodo(metodo, mensaje):
    if metodo not in Pago.Metodo.values:
        raise ValidationError(mensaje, errores={"metodo": ["Selecciona un método de pago válido"]})
    return metodo


def agregar_pago(inscripcion_id, monto, metodo, codigo="", registrado_por="", comprobante=None, academia=None):
    mensaje = "El pago no se pudo crear, verifica que los datos sean correctos"
    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    pago = Pago(
        inscripcion=inscripcion,
        monto=_a_monto(monto, "monto", mensaje),
        metodo=_validar_metodo(metodo, mensaje),
        codigo=codigo or "",
        registrado_por=registrado_por or "",
    )
    if comprobante is not None:
        pago.comprobante = comprobante
    with traducir_errores_bd("El pago no se pudo crear"), transaction.atomic():
        pago.save()
    logger.info("Pago %s registrado en inscripcion %s por %s", pago.pk, inscripcion.pk, pago.monto)
    return pago


def actualizar_pago(inscripcion_id, pago_id, academia=None, **cambios):
    """Actualiza un pago; si el pago no existe en la inscripcion no hace nada y devuelve ``None``."""
    mensaje = "El pago no se pudo actualizar, verifica que los datos sean correctos"
    desconocidos = set(cambios) - set(CAMPOS_PAGO_EDITABLES)
    if desconocidos:
        raise ValidationError(mensaje, errores={campo: ["Campo no editable"] for campo in sorted(desconocidos)})

    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    pago = buscar_por_pk(inscripcion.pagos.all(), pago_id)
    if pago is None:
        logger.info("Pago %s no existe en inscripcion %s; sin cambios", pago_id, inscripcion.pk)
        return None

    comprobante_anterior = None
    if "monto" in cambios:
        pago.monto = _a_monto(cambios["monto"], "monto", mensaje)
    if "metodo" in cambios:
        pago.metodo = _validar_metodo(cambios["metodo"], mensaje)
    if "codigo" in cambios:
        pago.codigo = cambios["codigo"] or ""
    if "registrado_por" in cambios:
        pago.registrado_por = cambios["registrado_por"] or ""
    if "comprobante" in cambios:
        if pago.comprobante:
            comprobante_anterior = pago.comprobante.name
        pago.comprobante = cambios["comprobante"]

    with traducir_errores_bd("El pago no se pudo actualizar"), transaction.atomic():
        pago.save()
    if comprobante_anterior and comprobante_anterior != pago.comprobante.name:
        pago.comprobante.storage.delete(comprobante_anterior)
    return pago


def eliminar_pago(inscripcion_id, pago_id, academia=None):
    """Elimina un pago; un ``pago_id`` inexistente deja la inscripcion intacta."""
    inscripcion = obtener_inscripcion(inscripcion_id, academia=academia)
    pago = buscar_por_pk(inscripcion.pagos.all(), pago_id)
    if pago is None:
        logger.info("Pago %s no existe en inscripcion %s; sin cambios", pago_id, inscripcion.pk)
        return False
    with traducir_errores_bd("El pago no se pudo eliminar"), transaction.atomic():
        pago.delete()
    if pago.comprobante:
        pago.comprobante.delete(save=False)
    logger.info("Pago %s eliminado de inscripcion %s", pago_id, inscripcion.pk)
    return True
