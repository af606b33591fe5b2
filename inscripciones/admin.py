from django.contrib import admin

from .models import Inscripcion, Pago


class PagoInline(admin.TabularInline):
    model = Pago
    extra = 0
    fields = ("monto", "metodo", "codigo", "comprobante", "registrado_por", "registrado_en")
    readonly_fields = ("registrado_en",)


@admin.register(Inscripcion)
class InscripcionAdmin(admin.ModelAdmin):
    list_display = (
        "alumno",
        "curso",
        "precio_cobrado",
        "total_pagado_display",
        "saldo_display",
        "clases_asistidas",
        "total_clases",
        "activa",
        "creada_en",
    )
    list_filter = ("activa", "incluye_matricula", "es_personalizada", "curso__academia", ("creada_en", admin.DateFieldListFilter))
    search_fields = ("alumno__nombre", "alumno__dni", "curso__nombre")
    autocomplete_fields = ("alumno", "curso")
    list_select_related = ("alumno", "curso")
    readonly_fields = ("precio_curso", "precio_matricula", "precio_cobrado", "clases_asistidas", "creada_en")
    date_hierarchy = "creada_en"
    inlines = [PagoInline]

    @admin.display(description="Pagado")
    def total_pagado_display(self, obj):
        return obj.total_pagado()

    @admin.display(description="Saldo")
    def saldo_display(self, obj):
        return obj.saldo()


@admin.register(Pago)
class PagoAdmin(admin.ModelAdmin):
    list_display = ("inscripcion", "monto", "metodo", "codigo", "registrado_por", "registrado_en")
    list_filter = ("metodo", ("registrado_en", admin.DateFieldListFilter))
    search_fields = ("codigo", "registrado_por", "inscripcion__alumno__nombre", "inscripcion__alumno__dni")
    autocomplete_fields = ("inscripcion",)
    list_select_related = ("inscripcion__alumno", "inscripcion__curso")
