from datetime import date, datetime, time
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from academias.models import Academia
from asistencias.services import registrar_asistencia
from cuentas.models import Alumno, Profesor
from cursos.models import Curso
from inscripciones.models import Pago
from inscripciones.services import agregar_pago, anular_inscripcion, crear_inscripcion

from .services import (
    estadisticas_alumno,
    estadisticas_curso,
    historial_asistencia_alumno,
    historial_asistencia_curso,
    pagos_por_dia,
    resumen_academia,
)


def _en_hora_local(dia, hora):
    return timezone.make_aware(datetime.combine(dia, time(hora)))


class ReportesTests(TestCase):
    def setUp(self):
        self.academia = Academia.objects.create(
            nombre="Academia Sol",
            tiene_matricula=True,
            precio_matricula=Decimal("30.00"),
        )
        self.profesor = Profesor.objects.create(academia=self.academia, nombre="Maria Chavez")
        self.curso = Curso.objects.create(
            academia=self.academia,
            nombre="Marinera",
            precio=Decimal("150.00"),
            total_clases=4,
        )
        self.alumno = Alumno.objects.create(academia=self.academia, nombre="Jorge Rios", dni="46123789")
        self.inscripcion = crear_inscripcion(self.alumno.pk, self.curso.pk, incluye_matricula=True)

    def _pago(self, monto, metodo, registrado_en):
        pago = agregar_pago(self.inscripcion.pk, monto, metodo, registrado_por="caja")
        Pago.objects.filter(pk=pago.pk).update(registrado_en=registrado_en)
        return pago

    def test_pagos_por_dia_agrupa_y_ordena(self):
        self._pago("50", Pago.Metodo.YAPE, _en_hora_local(date(2026, 5, 3), 10))
        self._pago("100", Pago.Metodo.EFECTIVO, _en_hora_local(date(2026, 5, 2), 9))
        self._pago("20", Pago.Metodo.EFECTIVO, _en_hora_local(date(2026, 5, 3), 18))

        dias = pagos_por_dia(self.academia)

        self.assertEqual([dia["fecha"] for dia in dias], [date(2026, 5, 2), date(2026, 5, 3)])
        self.assertEqual(dias[1]["total"], Decimal("70.00"))
        self.assertEqual(dias[1]["cantidad"], 2)
        self.assertEqual([pago["metodo"] for pago in dias[1]["pagos"]], ["yape", "efectivo"])

    def test_pagos_por_dia_filtra_por_rango(self):
        self._pago("100", Pago.Metodo.EFECTIVO, _en_hora_local(date(2026, 5, 2), 9))
        self._pago("50", Pago.Metodo.YAPE, _en_hora_local(date(2026, 5, 3), 10))

        dias = pagos_por_dia(self.academia, desde=date(2026, 5, 3), hasta=date(2026, 5, 3))

        self.assertEqual(len(dias), 1)
        self.assertEqual(dias[0]["total"], Decimal("50.00"))

    def test_pagos_de_otra_academia_no_aparecen(self):
        self._pago("100", Pago.Metodo.EFECTIVO, timezone.now())
        otra = Academia.objects.create(nombre="Otra academia")

        self.assertEqual(pagos_por_dia(otra), [])

    def test_historial_solo_incluye_asistencias_confirmadas(self):
        hoy = timezone.localdate()
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, fecha=hoy, confirmada_por_admin=True)
        registrar_asistencia(
            self.inscripcion.pk,
            self.profesor.pk,
            fecha=date(2026, 1, 5),
            marcada_por_alumno=True,
        )

        historial = historial_asistencia_alumno(self.alumno)

        self.assertEqual(len(historial), 1)
        self.assertEqual(historial[0]["clases_asistidas"], 1)
        self.assertEqual(historial[0]["porcentaje_avance"], 25)
        self.assertEqual([a.fecha for a in historial[0]["asistencias"]], [hoy])
        self.assertEqual(len(historial_asistencia_curso(self.curso)), 1)

    def test_estadisticas(self):
        registrar_asistencia(self.inscripcion.pk, self.profesor.pk, confirmada_por_admin=True)

        self.assertEqual(
            estadisticas_curso(self.curso),
            {"total_inscripciones": 1, "total_asistencias": 1},
        )
        self.assertEqual(estadisticas_alumno(self.alumno), {"total_inscripciones": 1})

    def test_resumen_academia(self):
        agregar_pago(self.inscripcion.pk, "100", Pago.Metodo.EFECTIVO)
        otro = Alumno.objects.create(academia=self.academia, nombre="Elsa Cruz", dni="46123790")
        baja = crear_inscripcion(otro.pk, self.curso.pk)
        anular_inscripcion(baja.pk)

        resumen = resumen_academia(self.academia)

        self.assertEqual(resumen["total_alumnos"], 2)
        self.assertEqual(resumen["inscripciones_activas"], 1)
        self.assertEqual(resumen["total_cobrado"], Decimal("330.00"))
        self.assertEqual(resumen["total_pagado"], Decimal("100.00"))
        self.assertEqual(resumen["saldo_pendiente"], Decimal("230.00"))
