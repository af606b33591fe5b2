from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion

import cuentas.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academias', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Alumno',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=255)),
                ('dni', models.CharField(max_length=8, validators=[cuentas.validators.validar_dni])),
                ('edad', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(120)])),
                ('es_menor_edad', models.BooleanField(default=False)),
                ('genero', models.CharField(blank=True, choices=[('varon', 'Varón'), ('dama', 'Dama')], max_length=10)),
                ('celular', models.CharField(blank=True, max_length=9, validators=[cuentas.validators.validar_celular])),
                ('nombre_apoderado', models.CharField(blank=True, max_length=255)),
                ('celular_apoderado', models.CharField(blank=True, max_length=9, validators=[cuentas.validators.validar_celular])),
                ('terminos_aceptados', models.BooleanField(default=False)),
                ('registrado_por', models.CharField(blank=True, max_length=255)),
                ('observaciones', models.TextField(blank=True)),
                ('creado_en', models.DateTimeField(auto_now_add=True)),
                ('actualizado_en', models.DateTimeField(auto_now=True)),
                ('academia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='alumnos', to='academias.academia')),
            ],
            options={
                'verbose_name': 'Alumno',
                'verbose_name_plural': 'Alumnos',
                'ordering': ['-creado_en'],
            },
        ),
        migrations.AddConstraint(
            model_name='alumno',
            constraint=models.UniqueConstraint(fields=('academia', 'dni'), name='alumno_dni_unico_por_academia'),
        ),
        migrations.CreateModel(
            name='Profesor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=255)),
                ('creado_en', models.DateTimeField(auto_now_add=True)),
                ('actualizado_en', models.DateTimeField(auto_now=True)),
                ('academia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='profesores', to='academias.academia')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='profesor', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Profesor',
                'verbose_name_plural': 'Profesores',
                'ordering': ['nombre'],
            },
        ),
    ]
