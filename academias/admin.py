from django.contrib import admin

from .models import Academia, MiembroAcademia


@admin.register(Academia)
class AcademiaAdmin(admin.ModelAdmin):
    list_display = ("nombre", "celular", "tiene_matricula", "precio_matricula", "creada_en")
    search_fields = ("nombre", "direccion", "celular")
    list_filter = ("tiene_matricula", ("creada_en", admin.DateFieldListFilter))
    list_per_page = 25
    ordering = ("nombre",)


@admin.register(MiembroAcademia)
class MiembroAcademiaAdmin(admin.ModelAdmin):
    list_display = ("user", "academia", "rol", "activo", "asignado_en")
    list_filter = ("rol", "academia", "activo")
    search_fields = ("user__username", "user__email", "academia__nombre")
    autocomplete_fields = ("user", "academia")
    list_select_related = ("user", "academia")
