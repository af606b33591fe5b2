from django.contrib import admin

from .models import Asistencia


@admin.register(Asistencia)
class AsistenciaAdmin(admin.ModelAdmin):
    list_display = ("inscripcion", "fecha", "profesor", "marcada_por_alumno", "confirmada_por_admin", "reprogramada")
    list_filter = ("confirmada_por_admin", "marcada_por_alumno", ("fecha", admin.DateFieldListFilter), "inscripcion__curso")
    search_fields = ("inscripcion__alumno__nombre", "inscripcion__alumno__dni", "inscripcion__curso__nombre")
    autocomplete_fields = ("inscripcion", "profesor")
    list_select_related = ("inscripcion__alumno", "inscripcion__curso", "profesor")
    date_hierarchy = "fecha"
    # El contador de la inscripcion solo se mantiene a traves de asistencias.services.
    readonly_fields = ("confirmada_por_admin",)
