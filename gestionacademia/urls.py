"""
URL configuration for gestionacademia project.

The JSON API lives under ``/api/`` and the Django admin under ``/admin/``.
Uploaded receipts and branding assets are served from ``MEDIA_URL`` in
development.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from django.utils.translation import gettext_lazy as _
from django.views.generic import RedirectView

admin.site.site_header = _("Administración Gestión Academia")
admin.site.site_title = _("Panel de control")
admin.site.index_title = _("Gestión de la academia")

urlpatterns = [
    path("", RedirectView.as_view(url="/admin/", permanent=False)),
    path("admin/", admin.site.urls),
    path("api/", include("api.urls")),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
