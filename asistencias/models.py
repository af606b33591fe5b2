from django.db import models
from django.utils import timezone


class Asistencia(models.Model):
    inscripcion = models.ForeignKey(
        "inscripciones.Inscripcion",
        on_delete=models.CASCADE,
        related_name="asistencias",
    )
    fecha = models.DateField(default=timezone.localdate)
    registrada_en = models.DateTimeField(default=timezone.now)
    profesor = models.ForeignKey(
        "cuentas.Profesor",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="asistencias",
    )
    marcada_por_alumno = models.BooleanField(default=False)
    confirmada_por_admin = models.BooleanField(default=False)
    reprogramada = models.BooleanField(default=False)
    actualizada_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Asistencia"
        verbose_name_plural = "Asistencias"
        ordering = ["-fecha", "-registrada_en"]
        constraints = [
            models.UniqueConstraint(fields=["inscripcion", "fecha"], name="asistencia_unica_por_dia"),
        ]

    def __str__(self) -> str:
        return f"{self.inscripcion} - {self.fecha}"
