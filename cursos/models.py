from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Horario(models.Model):
    class Dia(models.TextChoices):
        LUNES = "lunes", "Lunes"
        MARTES = "martes", "Martes"
        MIERCOLES = "miercoles", "Miercoles"
        JUEVES = "jueves", "Jueves"
        VIERNES = "viernes", "Viernes"
        SABADO = "sabado", "Sabado"
        DOMINGO = "domingo", "Domingo"

    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="horarios",
    )
    nombre = models.CharField(max_length=150)
    dias = models.JSONField(default=list, blank=True)
    hora_inicio = models.TimeField()
    hora_fin = models.TimeField()
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Horario"
        verbose_name_plural = "Horarios"
        ordering = ["hora_inicio", "nombre"]

    def __str__(self) -> str:
        return self.nombre

    def clean(self):
        errores = {}
        validos = set(self.Dia.values)
        if not isinstance(self.dias, list) or any(dia not in validos for dia in self.dias):
            errores["dias"] = "Selecciona días válidos (lunes a domingo)."
        if self.hora_inicio and self.hora_fin and self.hora_fin <= self.hora_inicio:
            errores["hora_fin"] = "La hora de fin debe ser posterior a la hora de inicio."
        if errores:
            raise ValidationError(errores)

    @property
    def dias_display(self):
        etiquetas = dict(self.Dia.choices)
        return ", ".join(etiquetas.get(dia, dia) for dia in self.dias or [])


class Periodo(models.Model):
    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="periodos",
    )
    nombre = models.CharField(max_length=150)
    fecha_inicio = models.DateField()
    fecha_fin = models.DateField()
    activo = models.BooleanField(default=True)
    creado_en = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Periodo"
        verbose_name_plural = "Periodos"
        ordering = ["-fecha_inicio"]

    def __str__(self) -> str:
        return self.nombre

    def clean(self):
        if self.fecha_inicio and self.fecha_fin and self.fecha_fin < self.fecha_inicio:
            raise ValidationError({"fecha_fin": "La fecha de fin no puede ser anterior a la de inicio."})


class Curso(models.Model):
    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="cursos",
    )
    nombre = models.CharField(max_length=150)
    descripcion = models.TextField(blank=True)
    precio = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    total_clases = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    horario = models.ForeignKey(
        Horario,
        on_delete=models.SET_NULL,
        related_name="cursos",
        null=True,
        blank=True,
    )
    profesor = models.ForeignKey(
        "cuentas.Profesor",
        on_delete=models.SET_NULL,
        related_name="cursos",
        null=True,
        blank=True,
    )
    activo = models.BooleanField(default=True)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Curso"
        verbose_name_plural = "Cursos"
        ordering = ["-creado_en"]

    def __str__(self) -> str:
        return self.nombre

    def clean(self):
        errores = {}
        if self.horario_id and self.horario.academia_id != self.academia_id:
            errores["horario"] = "El horario pertenece a otra academia."
        if self.profesor_id and self.profesor.academia_id != self.academia_id:
            errores["profesor"] = "El profesor pertenece a otra academia."
        if errores:
            raise ValidationError(errores)
