from django.contrib import admin

from .models import Curso, Horario, Periodo


@admin.register(Horario)
class HorarioAdmin(admin.ModelAdmin):
    list_display = ("nombre", "academia", "dias_display", "hora_inicio", "hora_fin")
    list_filter = ("academia",)
    search_fields = ("nombre",)
    list_select_related = ("academia",)

    @admin.display(description="Días")
    def dias_display(self, obj):
        return obj.dias_display


@admin.register(Periodo)
class PeriodoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "academia", "fecha_inicio", "fecha_fin", "activo")
    list_filter = ("academia", "activo", ("fecha_inicio", admin.DateFieldListFilter))
    search_fields = ("nombre",)
    date_hierarchy = "fecha_inicio"


@admin.register(Curso)
class CursoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "academia", "precio", "total_clases", "horario", "profesor", "activo")
    list_filter = ("academia", "activo", "profesor")
    search_fields = ("nombre", "descripcion", "profesor__nombre")
    autocomplete_fields = ("horario", "profesor")
    list_select_related = ("academia", "horario", "profesor")
