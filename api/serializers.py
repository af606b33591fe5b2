from decimal import Decimal

from rest_framework import serializers

from academias.models import Academia
from asistencias.models import Asistencia
from cuentas.models import Alumno, Profesor, Voluntario
from cuentas.validators import CELULAR_PATTERN, validar_dni
from cursos.models import Curso, Horario, Periodo
from inscripciones.models import Inscripcion, Pago


class AcademiaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Academia
        fields = [
            "id",
            "nombre",
            "descripcion",
            "direccion",
            "celular",
            "color_primario",
            "color_secundario",
            "logo",
            "archivo_terminos",
            "tiene_matricula",
            "precio_matricula",
        ]

    def validate(self, attrs):
        tiene_matricula = attrs.get("tiene_matricula", getattr(self.instance, "tiene_matricula", False))
        precio = attrs.get("precio_matricula", getattr(self.instance, "precio_matricula", Decimal("0")))
        if tiene_matricula and (precio is None or precio <= 0):
            raise serializers.ValidationError(
                {"precio_matricula": "El precio de la matrícula debe ser mayor a 0"}
            )
        return attrs


class AlumnoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Alumno
        fields = [
            "id",
            "nombre",
            "dni",
            "edad",
            "es_menor_edad",
            "genero",
            "celular",
            "nombre_apoderado",
            "celular_apoderado",
            "terminos_aceptados",
            "observaciones",
            "registrado_por",
            "creado_en",
        ]
        read_only_fields = ["registrado_por", "creado_en"]


class ProfesorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profesor
        fields = ["id", "nombre", "creado_en"]
        read_only_fields = ["creado_en"]


class HorarioSerializer(serializers.ModelSerializer):
    dias = serializers.ListField(child=serializers.ChoiceField(choices=Horario.Dia.choices), allow_empty=False)
    dias_display = serializers.CharField(read_only=True)

    class Meta:
        model = Horario
        fields = ["id", "nombre", "dias", "dias_display", "hora_inicio", "hora_fin"]

    def validate(self, attrs):
        inicio = attrs.get("hora_inicio", getattr(self.instance, "hora_inicio", None))
        fin = attrs.get("hora_fin", getattr(self.instance, "hora_fin", None))
        if inicio and fin and fin <= inicio:
            raise serializers.ValidationError({"hora_fin": "La hora de fin debe ser posterior a la hora de inicio."})
        return attrs


class PeriodoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Periodo
        fields = ["id", "nombre", "fecha_inicio", "fecha_fin", "activo"]

    def validate(self, attrs):
        inicio = attrs.get("fecha_inicio", getattr(self.instance, "fecha_inicio", None))
        fin = attrs.get("fecha_fin", getattr(self.instance, "fecha_fin", None))
        if inicio and fin and fin < inicio:
            raise serializers.ValidationError({"fecha_fin": "La fecha de fin no puede ser anterior a la de inicio."})
        return attrs


class CursoSerializer(serializers.ModelSerializer):
    horario_detalle = HorarioSerializer(source="horario", read_only=True)
    profesor_nombre = serializers.CharField(source="profesor.nombre", read_only=True, default=None)

    class Meta:
        model = Curso
        fields = [
            "id",
            "nombre",
            "descripcion",
            "precio",
            "total_clases",
            "horario",
            "horario_detalle",
            "profesor",
            "profesor_nombre",
            "activo",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        academia = self.context.get("academia")
        if academia is not None:
            self.fields["horario"].queryset = Horario.objects.filter(academia=academia)
            self.fields["profesor"].queryset = Profesor.objects.filter(academia=academia)


class PagoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pago
        fields = ["id", "monto", "metodo", "codigo", "comprobante", "registrado_por", "registrado_en"]


class PagoInputSerializer(serializers.Serializer):
    monto = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    metodo = serializers.ChoiceField(choices=Pago.Metodo.choices)
    codigo = serializers.CharField(max_length=100, required=False, allow_blank=True)
    comprobante = serializers.FileField(required=False, allow_null=True)


class AlumnoResumenSerializer(serializers.ModelSerializer):
    class Meta:
        model = Alumno
        fields = ["id", "nombre", "dni"]


class CursoResumenSerializer(serializers.ModelSerializer):
    horario = serializers.CharField(source="horario.nombre", read_only=True, default=None)
    profesor = serializers.CharField(source="profesor.nombre", read_only=True, default=None)

    class Meta:
        model = Curso
        fields = ["id", "nombre", "horario", "profesor"]


class InscripcionSerializer(serializers.ModelSerializer):
    alumno = AlumnoResumenSerializer(read_only=True)
    curso = CursoResumenSerializer(read_only=True)
    pagos = PagoSerializer(many=True, read_only=True)
    total_pagado = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    saldo = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Inscripcion
        fields = [
            "id",
            "alumno",
            "curso",
            "periodo",
            "fecha_inicio",
            "fecha_fin",
            "precio_curso",
            "precio_matricula",
            "precio_cobrado",
            "incluye_matricula",
            "es_personalizada",
            "activa",
            "clases_asistidas",
            "total_clases",
            "registrado_por",
            "creada_en",
            "total_pagado",
            "saldo",
            "pagos",
        ]


class InscripcionCreateSerializer(serializers.Serializer):
    alumno = serializers.IntegerField()
    curso = serializers.IntegerField()
    incluye_matricula = serializers.BooleanField(default=False)
    total_clases = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    precio_personalizado = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )
    periodo = serializers.IntegerField(required=False, allow_null=True)
    fecha_inicio = serializers.DateField(required=False, allow_null=True)
    fecha_fin = serializers.DateField(required=False, allow_null=True)


class InscripcionUpdateSerializer(serializers.Serializer):
    periodo = serializers.IntegerField(required=False, allow_null=True)
    fecha_inicio = serializers.DateField(required=False, allow_null=True)
    fecha_fin = serializers.DateField(required=False, allow_null=True)
    total_clases = serializers.IntegerField(min_value=1, required=False)
    activa = serializers.BooleanField(required=False)


class AsistenciaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Asistencia
        fields = [
            "id",
            "inscripcion",
            "fecha",
            "registrada_en",
            "profesor",
            "marcada_por_alumno",
            "confirmada_por_admin",
            "reprogramada",
        ]


class AsistenciaInputSerializer(serializers.Serializer):
    profesor = serializers.IntegerField(required=False)
    fecha = serializers.DateField(required=False)
    marcada_por_alumno = serializers.BooleanField(required=False, allow_null=True)
    confirmada_por_admin = serializers.BooleanField(required=False, allow_null=True)


class AsistenciaRosterSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    registrada_en = serializers.DateTimeField(allow_null=True)
    marcada_por_alumno = serializers.BooleanField()
    confirmada_por_admin = serializers.BooleanField()
    reprogramada = serializers.BooleanField()
    profesor_id = serializers.IntegerField(allow_null=True)
    tiene_asistencia = serializers.BooleanField()


class AlumnoRosterSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    nombre = serializers.CharField()
    dni = serializers.CharField()


class RosterSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    curso_id = serializers.IntegerField()
    alumno_id = serializers.IntegerField()
    clases_asistidas = serializers.IntegerField()
    total_clases = serializers.IntegerField()
    creada_en = serializers.DateTimeField()
    asistencia = AsistenciaRosterSerializer()
    alumno = AlumnoRosterSerializer()


class HistorialAsistenciaSerializer(serializers.Serializer):
    inscripcion = InscripcionSerializer()
    clases_asistidas = serializers.IntegerField()
    total_clases = serializers.IntegerField()
    porcentaje_avance = serializers.IntegerField()
    asistencias = AsistenciaSerializer(many=True)


class PagoDelDiaSerializer(serializers.Serializer):
    monto = serializers.DecimalField(max_digits=12, decimal_places=2)
    metodo = serializers.CharField()
    codigo = serializers.CharField(allow_blank=True)
    registrado_por = serializers.CharField(allow_blank=True)


class PagosPorDiaSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    cantidad = serializers.IntegerField()
    pagos = PagoDelDiaSerializer(many=True)


class ResumenAcademiaSerializer(serializers.Serializer):
    total_alumnos = serializers.IntegerField()
    inscripciones_activas = serializers.IntegerField()
    asistencias_confirmadas = serializers.IntegerField()
    total_cobrado = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_pagado = serializers.DecimalField(max_digits=14, decimal_places=2)
    saldo_pendiente = serializers.DecimalField(max_digits=14, decimal_places=2)


class CarnetSerializer(serializers.ModelSerializer):
    codigo_qr = serializers.CharField(source="pk", read_only=True)
    alumno = AlumnoResumenSerializer(read_only=True)
    curso = serializers.CharField(source="curso.nombre", read_only=True)
    horario = HorarioSerializer(source="curso.horario", read_only=True, default=None)
    profesor = serializers.CharField(source="curso.profesor.nombre", read_only=True, default=None)
    academia = serializers.CharField(source="curso.academia.nombre", read_only=True)
    color_primario = serializers.CharField(source="curso.academia.color_primario", read_only=True)
    color_secundario = serializers.CharField(source="curso.academia.color_secundario", read_only=True)
    porcentaje_avance = serializers.IntegerField(read_only=True)
    total_pagado = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    saldo = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Inscripcion
        fields = [
            "id",
            "codigo_qr",
            "alumno",
            "curso",
            "horario",
            "profesor",
            "academia",
            "color_primario",
            "color_secundario",
            "fecha_inicio",
            "fecha_fin",
            "clases_asistidas",
            "total_clases",
            "porcentaje_avance",
            "precio_curso",
            "precio_matricula",
            "precio_cobrado",
            "total_pagado",
            "saldo",
            "es_personalizada",
            "activa",
        ]


class VoluntarioSerializer(serializers.ModelSerializer):
    class Meta:
        model = Voluntario
        fields = [
            "id",
            "nombre",
            "dni",
            "edad",
            "es_menor_edad",
            "genero",
            "celular",
            "comision",
            "talla_polo",
            "metodo_pago",
            "comprobante_pago",
            "pago_verificado",
            "nombre_apoderado",
            "celular_apoderado",
            "terminos_aceptados",
            "observaciones",
            "registrado_por",
            "activo",
            "presente",
            "check_in_en",
            "creado_en",
        ]
        read_only_fields = ["registrado_por", "presente", "check_in_en", "creado_en"]


class VoluntarioCarnetSerializer(serializers.ModelSerializer):
    codigo_qr = serializers.CharField(source="pk", read_only=True)
    academia = serializers.CharField(source="academia.nombre", read_only=True)
    color_primario = serializers.CharField(source="academia.color_primario", read_only=True)
    color_secundario = serializers.CharField(source="academia.color_secundario", read_only=True)

    class Meta:
        model = Voluntario
        fields = [
            "id",
            "codigo_qr",
            "nombre",
            "dni",
            "comision",
            "talla_polo",
            "academia",
            "color_primario",
            "color_secundario",
            "pago_verificado",
            "activo",
            "presente",
            "check_in_en",
        ]


class DatosInscritoSerializer(serializers.Serializer):
    """Datos personales comunes a los formularios publicos."""

    nombre = serializers.CharField(max_length=255)
    dni = serializers.CharField(max_length=8, validators=[validar_dni])
    edad = serializers.IntegerField(
        min_value=14,
        max_value=90,
        error_messages={
            "min_value": "La edad mínima es de 14 años",
            "max_value": "La edad no puede superar 90 años",
        },
    )
    genero = serializers.ChoiceField(choices=Alumno.Genero.choices)
    celular = serializers.RegexField(
        CELULAR_PATTERN,
        error_messages={"invalid": "El número debe tener exactamente 9 dígitos numéricos"},
    )
    es_menor_edad = serializers.BooleanField(default=False)
    nombre_apoderado = serializers.CharField(max_length=255, required=False, allow_blank=True)
    celular_apoderado = serializers.RegexField(CELULAR_PATTERN, required=False, allow_blank=True)
    terminos_aceptados = serializers.BooleanField()

    def validate_terminos_aceptados(self, value):
        if not value:
            raise serializers.ValidationError("Debes aceptar los términos y condiciones")
        return value

    def validate(self, attrs):
        if attrs.get("es_menor_edad") and not attrs.get("nombre_apoderado"):
            raise serializers.ValidationError({"nombre_apoderado": "El nombre del apoderado es requerido"})
        return attrs


class AutoinscripcionSerializer(DatosInscritoSerializer):
    curso = serializers.IntegerField()
    incluye_matricula = serializers.BooleanField(default=False)
    monto_pago = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )
    codigo_pago = serializers.CharField(max_length=100, required=False, allow_blank=True)
    comprobante_pago = serializers.FileField(required=False, allow_null=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get("monto_pago") and not attrs.get("codigo_pago"):
            raise serializers.ValidationError({"codigo_pago": "Ingresa el código de operación de Yape"})
        return attrs


class AutoinscripcionVoluntarioSerializer(DatosInscritoSerializer):
    comision = serializers.CharField(max_length=100)
    talla_polo = serializers.CharField(max_length=5, required=False, allow_blank=True)
    metodo_pago = serializers.ChoiceField(choices=Voluntario.MetodoPago.choices, required=False, allow_blank=True)
    comprobante_pago = serializers.FileField(required=False, allow_null=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get("metodo_pago") == Voluntario.MetodoPago.YAPE and not attrs.get("comprobante_pago"):
            raise serializers.ValidationError({"comprobante_pago": "Adjunta la captura del pago por Yape"})
        return attrs
