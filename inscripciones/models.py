import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Inscripcion(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    alumno = models.ForeignKey(
        "cuentas.Alumno",
        on_delete=models.CASCADE,
        related_name="inscripciones",
    )
    curso = models.ForeignKey(
        "cursos.Curso",
        on_delete=models.PROTECT,
        related_name="inscripciones",
    )
    periodo = models.ForeignKey(
        "cursos.Periodo",
        on_delete=models.SET_NULL,
        related_name="inscripciones",
        null=True,
        blank=True,
    )
    fecha_inicio = models.DateField(null=True, blank=True)
    fecha_fin = models.DateField(null=True, blank=True)
    # Foto del cobro al momento de inscribir; no sigue los cambios del curso.
    precio_curso = models.DecimalField(max_digits=10, decimal_places=2)
    precio_matricula = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    precio_cobrado = models.DecimalField(max_digits=10, decimal_places=2)
    incluye_matricula = models.BooleanField(default=False)
    es_personalizada = models.BooleanField(default=False)
    activa = models.BooleanField(default=True)
    clases_asistidas = models.PositiveIntegerField(default=0)
    total_clases = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    registrado_por = models.CharField(max_length=255, blank=True)
    creada_en = models.DateTimeField(auto_now_add=True)
    actualizada_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Inscripcion"
        verbose_name_plural = "Inscripciones"
        ordering = ["-creada_en"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(clases_asistidas__gte=0),
                name="inscripcion_clases_asistidas_no_negativas",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.alumno} - {self.curso}"

    def total_pagado(self):
        total = self.pagos.aggregate(total=models.Sum("monto"))["total"]
        return total if total is not None else Decimal("0")

    def saldo(self):
        # Negativo cuando se pago de mas.
        return self.precio_cobrado - self.total_pagado()

    def porcentaje_avance(self):
        if not self.total_clases:
            return 0
        return round(self.clases_asistidas * 100 / self.total_clases)


class Pago(models.Model):
    class Metodo(models.TextChoices):
        YAPE = "yape", "Yape"
        EFECTIVO = "efectivo", "Efectivo"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    inscripcion = models.ForeignKey(
        Inscripcion,
        on_delete=models.CASCADE,
        related_name="pagos",
    )
    monto = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    metodo = models.CharField(max_length=20, choices=Metodo.choices)
    codigo = models.CharField(max_length=100, blank=True)
    comprobante = models.FileField(upload_to="comprobantes/pagos/", null=True, blank=True)
    registrado_por = models.CharField(max_length=255, blank=True)
    registrado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Pago"
        verbose_name_plural = "Pagos"
        ordering = ["registrado_en"]

    def __str__(self) -> str:
        return f"{self.monto} - {self.get_metodo_display()}"
