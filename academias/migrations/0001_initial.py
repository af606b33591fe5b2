from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Academia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=255)),
                ('descripcion', models.TextField(blank=True)),
                ('direccion', models.CharField(blank=True, max_length=255)),
                ('celular', models.CharField(blank=True, max_length=50)),
                ('color_primario', models.CharField(blank=True, max_length=20)),
                ('color_secundario', models.CharField(blank=True, max_length=20)),
                ('logo', models.FileField(blank=True, null=True, upload_to='academias/logos/')),
                ('archivo_terminos', models.FileField(blank=True, null=True, upload_to='academias/terminos/')),
                ('tiene_matricula', models.BooleanField(default=False)),
                ('precio_matricula', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('creada_en', models.DateTimeField(auto_now_add=True)),
                ('actualizada_en', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Academia',
                'verbose_name_plural': 'Academias',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='MiembroAcademia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rol', models.CharField(choices=[('admin', 'Administrador'), ('profesor', 'Profesor')], default='admin', max_length=20)),
                ('activo', models.BooleanField(default=True)),
                ('asignado_en', models.DateField(auto_now_add=True)),
                ('academia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='miembros', to='academias.academia')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='miembro_academia', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Miembro de academia',
                'verbose_name_plural': 'Miembros de academia',
            },
        ),
    ]
