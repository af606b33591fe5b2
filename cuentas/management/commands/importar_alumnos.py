import unicodedata
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from openpyxl import load_workbook

from academias.models import Academia
from cuentas.models import Alumno
from cuentas.services import validar_apoderado
from cuentas.validators import CELULAR_PATTERN, es_dni_valido
from gestionacademia.exceptions import ValidationError, validar_modelo

REGISTRO_IMPORTACION = "importacion"

GENEROS = {
    "varon": Alumno.Genero.VARON,
    "masculino": Alumno.Genero.VARON,
    "m": Alumno.Genero.VARON,
    "dama": Alumno.Genero.DAMA,
    "femenino": Alumno.Genero.DAMA,
    "f": Alumno.Genero.DAMA,
}


def normalizar_texto(valor) -> str:
    valor = unicodedata.normalize("NFKD", str(valor or ""))
    valor = valor.encode("ascii", "ignore").decode("ascii")
    return valor.strip().lower()


def normalizar_dni(valor) -> str:
    if valor is None:
        return ""
    if isinstance(valor, float) and valor.is_integer():
        valor = int(valor)
    if isinstance(valor, int) and not isinstance(valor, bool):
        dni = str(valor)
        # Excel guarda el DNI como numero y pierde el cero inicial.
        return dni.zfill(8) if len(dni) == 7 else dni
    return str(valor).strip()


def normalizar_celular(valor) -> str:
    if isinstance(valor, float) and valor.is_integer():
        valor = int(valor)
    celular = str(valor or "").strip().replace(" ", "")
    return celular if CELULAR_PATTERN.match(celular) else ""


def leer_edad(valor):
    try:
        edad = int(valor)
    except (TypeError, ValueError):
        return None
    return edad if 1 <= edad <= 120 else None


class Command(BaseCommand):
    help = "Importa alumnos desde una planilla Excel (columnas Nombre, DNI, Edad, Genero, Celular, Apoderado)."

    def add_arguments(self, parser):
        parser.add_argument("archivo", help="Ruta al archivo .xlsx con los alumnos.")
        parser.add_argument("--academia", type=int, required=True, help="Id de la academia destino.")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Simula el proceso sin escribir en la base de datos.",
        )

    def handle(self, *args, **options):
        archivo = Path(options["archivo"])
        if not archivo.exists():
            raise CommandError(f"No existe el archivo: {archivo}")
        try:
            academia = Academia.objects.get(pk=options["academia"])
        except Academia.DoesNotExist:
            raise CommandError(f"No existe la academia {options['academia']}")

        wb = load_workbook(archivo, read_only=True, data_only=True)
        ws = wb.active
        filas = ws.iter_rows(values_only=True)
        encabezado = next(filas, None)
        if not encabezado:
            self.stdout.write("La planilla esta vacia.")
            return
        headers = [normalizar_texto(valor) for valor in encabezado]

        existentes = set(Alumno.objects.filter(academia=academia).values_list("dni", flat=True))
        nuevos = []
        omitidos = 0
        for idx, row in enumerate(filas, start=2):
            data = dict(zip(headers, row))
            nombre = str(data.get("nombre") or data.get("alumno") or "").strip()
            dni = normalizar_dni(data.get("dni"))
            if not nombre:
                self.stdout.write(f"[Fila {idx}] Sin nombre, se omite.")
                omitidos += 1
                continue
            if not es_dni_valido(dni):
                self.stdout.write(f"[Fila {idx}] DNI invalido ({dni}), se omite.")
                omitidos += 1
                continue
            if dni in existentes:
                self.stdout.write(f"[Fila {idx}] DNI {dni} ya registrado, se omite.")
                omitidos += 1
                continue

            edad = leer_edad(data.get("edad"))
            alumno = Alumno(
                academia=academia,
                nombre=nombre,
                dni=dni,
                edad=edad,
                es_menor_edad=edad is not None and edad < 18,
                genero=GENEROS.get(normalizar_texto(data.get("genero")), ""),
                celular=normalizar_celular(data.get("celular")),
                nombre_apoderado=str(data.get("apoderado") or "").strip(),
                celular_apoderado=normalizar_celular(data.get("celular apoderado")),
                registrado_por=REGISTRO_IMPORTACION,
            )
            try:
                validar_modelo(alumno, f"Datos invalidos en la fila {idx}")
                validar_apoderado(alumno)
            except ValidationError as exc:
                self.stdout.write(f"[Fila {idx}] {exc.mensaje} ({', '.join(exc.errores)}), se omite.")
                omitidos += 1
                continue
            existentes.add(dni)
            nuevos.append(alumno)
        wb.close()

        total = len(nuevos)
        if options["dry_run"]:
            self.stdout.write(f"Se crearian {total} alumnos ({omitidos} omitidos).")
            for alumno in nuevos[:10]:
                self.stdout.write(f"- {alumno.dni} {alumno.nombre}")
            return

        with transaction.atomic():
            Alumno.objects.bulk_create(nuevos, batch_size=1000)
        self.stdout.write(f"Alumnos creados: {total} ({omitidos} omitidos)")
