import uuid

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion

import cuentas.validators


class Migration(migrations.Migration):

    dependencies = [
        ('academias', '0001_initial'),
        ('cuentas', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Voluntario',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('nombre', models.CharField(max_length=255)),
                ('dni', models.CharField(max_length=8, validators=[cuentas.validators.validar_dni])),
                ('edad', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(120)])),
                ('es_menor_edad', models.BooleanField(default=False)),
                ('genero', models.CharField(blank=True, choices=[('varon', 'Varón'), ('dama', 'Dama')], max_length=10)),
                ('celular', models.CharField(blank=True, max_length=9, validators=[cuentas.validators.validar_celular])),
                ('comision', models.CharField(max_length=100)),
                ('talla_polo', models.CharField(blank=True, max_length=5)),
                ('metodo_pago', models.CharField(blank=True, choices=[('yape', 'Yape'), ('efectivo', 'Efectivo')], max_length=20)),
                ('comprobante_pago', models.FileField(blank=True, null=True, upload_to='comprobantes/voluntarios/')),
                ('pago_verificado', models.BooleanField(default=False)),
                ('nombre_apoderado', models.CharField(blank=True, max_length=255)),
                ('celular_apoderado', models.CharField(blank=True, max_length=9, validators=[cuentas.validators.validar_celular])),
                ('terminos_aceptados', models.BooleanField(default=False)),
                ('observaciones', models.TextField(blank=True)),
                ('registrado_por', models.CharField(blank=True, max_length=255)),
                ('activo', models.BooleanField(default=True)),
                ('presente', models.BooleanField(default=False)),
                ('check_in_en', models.DateTimeField(blank=True, null=True)),
                ('creado_en', models.DateTimeField(auto_now_add=True)),
                ('actualizado_en', models.DateTimeField(auto_now=True)),
                ('academia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='voluntarios', to='academias.academia')),
            ],
            options={
                'verbose_name': 'Voluntario',
                'verbose_name_plural': 'Voluntarios',
                'ordering': ['-creado_en'],
            },
        ),
        migrations.AddConstraint(
            model_name='voluntario',
            constraint=models.UniqueConstraint(fields=('academia', 'dni'), name='voluntario_dni_unico_por_academia'),
        ),
    ]
