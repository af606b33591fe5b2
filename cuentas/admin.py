from django.contrib import admin

from .models import Alumno, Profesor, Voluntario


@admin.register(Alumno)
class AlumnoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "dni", "academia", "edad", "celular", "es_menor_edad", "creado_en")
    search_fields = ("nombre", "dni", "celular", "nombre_apoderado")
    list_filter = ("academia", "genero", "es_menor_edad", ("creado_en", admin.DateFieldListFilter))
    list_select_related = ("academia",)
    list_per_page = 25


@admin.register(Profesor)
class ProfesorAdmin(admin.ModelAdmin):
    list_display = ("nombre", "academia", "user", "creado_en")
    search_fields = ("nombre", "user__username", "user__email")
    list_filter = ("academia",)
    autocomplete_fields = ("user",)
    list_select_related = ("academia", "user")


@admin.register(Voluntario)
class VoluntarioAdmin(admin.ModelAdmin):
    list_display = ("nombre", "dni", "academia", "comision", "talla_polo", "pago_verificado", "presente", "activo")
    search_fields = ("nombre", "dni", "celular", "comision")
    list_filter = ("academia", "comision", "metodo_pago", "pago_verificado", "presente", "activo")
    readonly_fields = ("check_in_en", "creado_en", "actualizado_en")
    list_select_related = ("academia",)
    list_per_page = 25
