import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .validators import validar_celular, validar_dni


class Alumno(models.Model):
    class Genero(models.TextChoices):
        VARON = "varon", "Varón"
        DAMA = "dama", "Dama"

    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="alumnos",
    )
    nombre = models.CharField(max_length=255)
    dni = models.CharField(max_length=8, validators=[validar_dni])
    edad = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(120)],
    )
    es_menor_edad = models.BooleanField(default=False)
    genero = models.CharField(max_length=10, choices=Genero.choices, blank=True)
    celular = models.CharField(max_length=9, blank=True, validators=[validar_celular])
    nombre_apoderado = models.CharField(max_length=255, blank=True)
    celular_apoderado = models.CharField(max_length=9, blank=True, validators=[validar_celular])
    terminos_aceptados = models.BooleanField(default=False)
    registrado_por = models.CharField(max_length=255, blank=True)
    observaciones = models.TextField(blank=True)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Alumno"
        verbose_name_plural = "Alumnos"
        ordering = ["-creado_en"]
        constraints = [
            models.UniqueConstraint(fields=["academia", "dni"], name="alumno_dni_unico_por_academia"),
        ]

    def __str__(self) -> str:
        return f"{self.nombre} ({self.dni})"


class Profesor(models.Model):
    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="profesores",
    )
    nombre = models.CharField(max_length=255)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profesor",
    )
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Profesor"
        verbose_name_plural = "Profesores"
        ordering = ["nombre"]

    def __str__(self) -> str:
        return self.nombre


class Voluntario(models.Model):
    class MetodoPago(models.TextChoices):
        YAPE = "yape", "Yape"
        EFECTIVO = "efectivo", "Efectivo"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    academia = models.ForeignKey(
        "academias.Academia",
        on_delete=models.CASCADE,
        related_name="voluntarios",
    )
    nombre = models.CharField(max_length=255)
    dni = models.CharField(max_length=8, validators=[validar_dni])
    edad = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(120)],
    )
    es_menor_edad = models.BooleanField(default=False)
    genero = models.CharField(max_length=10, choices=Alumno.Genero.choices, blank=True)
    celular = models.CharField(max_length=9, blank=True, validators=[validar_celular])
    comision = models.CharField(max_length=100)
    talla_polo = models.CharField(max_length=5, blank=True)
    metodo_pago = models.CharField(max_length=20, choices=MetodoPago.choices, blank=True)
    comprobante_pago = models.FileField(upload_to="comprobantes/voluntarios/", null=True, blank=True)
    pago_verificado = models.BooleanField(default=False)
    nombre_apoderado = models.CharField(max_length=255, blank=True)
    celular_apoderado = models.CharField(max_length=9, blank=True, validators=[validar_celular])
    terminos_aceptados = models.BooleanField(default=False)
    observaciones = models.TextField(blank=True)
    registrado_por = models.CharField(max_length=255, blank=True)
    activo = models.BooleanField(default=True)
    # Check-in del dia del evento, marcado al escanear el carnet.
    presente = models.BooleanField(default=False)
    check_in_en = models.DateTimeField(null=True, blank=True)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Voluntario"
        verbose_name_plural = "Voluntarios"
        ordering = ["-creado_en"]
        constraints = [
            models.UniqueConstraint(fields=["academia", "dni"], name="voluntario_dni_unico_por_academia"),
        ]

    def __str__(self) -> str:
        return f"{self.nombre} ({self.comision})"
