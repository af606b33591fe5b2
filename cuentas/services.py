import logging

from django.db import transaction
from django.utils import timezone

from gestionacademia.exceptions import NotFoundError, ValidationError, traducir_errores_bd, validar_modelo
from gestionacademia.utils import buscar_por_pk
from inscripciones.models import Pago

from .models import Alumno, Voluntario

logger = logging.getLogger(__name__)

MENSAJE_DNI_DUPLICADO = "Ya existe un alumno registrado con ese DNI"
MENSAJE_DNI_VOLUNTARIO_DUPLICADO = "Ya existe una inscripción de voluntario con el mismo DNI"


def validar_apoderado(persona):
    """Un menor de edad (alumno o voluntario) debe registrar a su apoderado."""
    if persona.es_menor_edad and not persona.nombre_apoderado:
        raise ValidationError(
            "El inscrito es menor de edad, verifica los datos del apoderado",
            errores={"nombre_apoderado": ["El nombre del apoderado es requerido"]},
        )


def registrar_alumno(academia, registrado_por="", **datos):
    alumno = Alumno(academia=academia, registrado_por=registrado_por or "", **datos)
    validar_modelo(alumno, "El alumno no se pudo crear, verifica que los datos sean correctos")
    validar_apoderado(alumno)
    with traducir_errores_bd("El alumno no se pudo crear", MENSAJE_DNI_DUPLICADO), transaction.atomic():
        alumno.save()
    logger.info("Alumno %s registrado en academia %s", alumno.pk, academia.pk)
    return alumno


def actualizar_alumno(alumno, **cambios):
    for campo, valor in cambios.items():
        setattr(alumno, campo, valor)
    validar_modelo(alumno, "El alumno no se pudo actualizar, verifica que los datos sean correctos")
    validar_apoderado(alumno)
    with traducir_errores_bd("El alumno no se pudo actualizar", MENSAJE_DNI_DUPLICADO), transaction.atomic():
        alumno.save()
    return alumno


def eliminar_alumno(alumno):
    """Borra al alumno con sus inscripciones y pagos, y luego los comprobantes subidos."""
    comprobantes = [
        pago.comprobante
        for pago in Pago.objects.filter(inscripcion__alumno=alumno)
        if pago.comprobante
    ]
    alumno_id = alumno.pk
    with traducir_errores_bd("El alumno no se pudo eliminar"), transaction.atomic():
        alumno.delete()
    for archivo in comprobantes:
        archivo.delete(save=False)
    logger.info("Alumno %s eliminado junto con %s comprobantes", alumno_id, len(comprobantes))


def registrar_voluntario(academia, registrado_por="", **datos):
    voluntario = Voluntario(academia=academia, registrado_por=registrado_por or "", **datos)
    validar_modelo(voluntario, "La inscripción no se pudo registrar, verifica que los datos sean correctos")
    validar_apoderado(voluntario)
    with traducir_errores_bd(
        "La inscripción no se pudo registrar",
        MENSAJE_DNI_VOLUNTARIO_DUPLICADO,
    ), transaction.atomic():
        voluntario.save()
    logger.info("Voluntario %s registrado en academia %s (%s)", voluntario.pk, academia.pk, voluntario.comision)
    return voluntario


def actualizar_voluntario(voluntario, **cambios):
    comprobante_anterior = None
    if "comprobante_pago" in cambios and voluntario.comprobante_pago:
        comprobante_anterior = voluntario.comprobante_pago.name
    for campo, valor in cambios.items():
        setattr(voluntario, campo, valor)
    validar_modelo(voluntario, "El voluntario no se pudo actualizar, verifica que los datos sean correctos")
    validar_apoderado(voluntario)
    with traducir_errores_bd(
        "El voluntario no se pudo actualizar",
        MENSAJE_DNI_VOLUNTARIO_DUPLICADO,
    ), transaction.atomic():
        voluntario.save()
    if comprobante_anterior and comprobante_anterior != voluntario.comprobante_pago.name:
        voluntario.comprobante_pago.storage.delete(comprobante_anterior)
    return voluntario


def obtener_voluntario(voluntario_id, academia=None):
    qs = Voluntario.objects.select_related("academia")
    if academia is not None:
        qs = qs.filter(academia=academia)
    voluntario = buscar_por_pk(qs, voluntario_id)
    if voluntario is None:
        raise NotFoundError("Voluntario no encontrado")
    return voluntario


def registrar_check_in_voluntario(voluntario_id, academia=None):
    """Alterna el check-in del voluntario; un voluntario anulado no puede ingresar."""
    with traducir_errores_bd("No se pudo registrar el check-in"), transaction.atomic():
        voluntario = obtener_voluntario(voluntario_id, academia=academia)
        if not voluntario.activo:
            raise ValidationError("La inscripción del voluntario está anulada")
        voluntario.presente = not voluntario.presente
        voluntario.check_in_en = timezone.now() if voluntario.presente else None
        voluntario.save(update_fields=["presente", "check_in_en", "actualizado_en"])
    logger.info("Check-in de voluntario %s: presente=%s", voluntario.pk, voluntario.presente)
    return voluntario


def anular_voluntario(voluntario):
    if voluntario.activo:
        voluntario.activo = False
        with traducir_errores_bd("El voluntario no se pudo anular"):
            voluntario.save(update_fields=["activo", "actualizado_en"])
        logger.info("Voluntario %s anulado", voluntario.pk)
    return voluntario


def eliminar_voluntario(voluntario):
    comprobante = voluntario.comprobante_pago if voluntario.comprobante_pago else None
    voluntario_id = voluntario.pk
    with traducir_errores_bd("El voluntario no se pudo eliminar"), transaction.atomic():
        voluntario.delete()
    if comprobante:
        comprobante.delete(save=False)
    logger.info("Voluntario %s eliminado", voluntario_id)
