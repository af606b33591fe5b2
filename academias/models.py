from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Academia(models.Model):
    nombre = models.CharField(max_length=255)
    descripcion = models.TextField(blank=True)
    direccion = models.CharField(max_length=255, blank=True)
    celular = models.CharField(max_length=50, blank=True)
    color_primario = models.CharField(max_length=20, blank=True)
    color_secundario = models.CharField(max_length=20, blank=True)
    logo = models.FileField(upload_to="academias/logos/", null=True, blank=True)
    archivo_terminos = models.FileField(upload_to="academias/terminos/", null=True, blank=True)
    tiene_matricula = models.BooleanField(default=False)
    precio_matricula = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    creada_en = models.DateTimeField(auto_now_add=True)
    actualizada_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Academia"
        verbose_name_plural = "Academias"
        ordering = ["nombre"]

    def __str__(self) -> str:
        return self.nombre

    def clean(self):
        if self.tiene_matricula and (self.precio_matricula or 0) <= 0:
            raise ValidationError(
                {"precio_matricula": "El precio de la matrícula debe ser mayor a 0"}
            )

    def save(self, *args, **kwargs):
        # Sin matricula no se cobra nada por ese concepto.
        if not self.tiene_matricula:
            self.precio_matricula = Decimal("0")
        super().save(*args, **kwargs)


class MiembroAcademia(models.Model):
    class Rol(models.TextChoices):
        ADMIN = "admin", "Administrador"
        PROFESOR = "profesor", "Profesor"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="miembro_academia",
    )
    academia = models.ForeignKey(
        Academia,
        on_delete=models.CASCADE,
        related_name="miembros",
    )
    rol = models.CharField(max_length=20, choices=Rol.choices, default=Rol.ADMIN)
    activo = models.BooleanField(default=True)
    asignado_en = models.DateField(auto_now_add=True)

    class Meta:
        verbose_name = "Miembro de academia"
        verbose_name_plural = "Miembros de academia"

    def __str__(self) -> str:
        return f"{self.user} - {self.academia} ({self.get_rol_display()})"
