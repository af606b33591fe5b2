from decimal import Decimal
import uuid

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('cuentas', '0001_initial'),
        ('cursos', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Inscripcion',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('fecha_inicio', models.DateField(blank=True, null=True)),
                ('fecha_fin', models.DateField(blank=True, null=True)),
                ('precio_curso', models.DecimalField(decimal_places=2, max_digits=10)),
                ('precio_matricula', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('precio_cobrado', models.DecimalField(decimal_places=2, max_digits=10)),
                ('incluye_matricula', models.BooleanField(default=False)),
                ('es_personalizada', models.BooleanField(default=False)),
                ('activa', models.BooleanField(default=True)),
                ('clases_asistidas', models.PositiveIntegerField(default=0)),
                ('total_clases', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('registrado_por', models.CharField(blank=True, max_length=255)),
                ('creada_en', models.DateTimeField(auto_now_add=True)),
                ('actualizada_en', models.DateTimeField(auto_now=True)),
                ('alumno', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='inscripciones', to='cuentas.alumno')),
                ('curso', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inscripciones', to='cursos.curso')),
                ('periodo', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inscripciones', to='cursos.periodo')),
            ],
            options={
                'verbose_name': 'Inscripcion',
                'verbose_name_plural': 'Inscripciones',
                'ordering': ['-creada_en'],
            },
        ),
        migrations.AddConstraint(
            model_name='inscripcion',
            constraint=models.CheckConstraint(condition=models.Q(('clases_asistidas__gte', 0)), name='inscripcion_clases_asistidas_no_negativas'),
        ),
        migrations.CreateModel(
            name='Pago',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('monto', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('metodo', models.CharField(choices=[('yape', 'Yape'), ('efectivo', 'Efectivo')], max_length=20)),
                ('codigo', models.CharField(blank=True, max_length=100)),
                ('comprobante', models.FileField(blank=True, null=True, upload_to='comprobantes/pagos/')),
                ('registrado_por', models.CharField(blank=True, max_length=255)),
                ('registrado_en', models.DateTimeField(auto_now_add=True)),
                ('actualizado_en', models.DateTimeField(auto_now=True)),
                ('inscripcion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pagos', to='inscripciones.inscripcion')),
            ],
            options={
                'verbose_name': 'Pago',
                'verbose_name_plural': 'Pagos',
                'ordering': ['registrado_en'],
            },
        ),
    ]
