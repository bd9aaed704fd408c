"""
URL configuration for the losares project.

The dashboard API lives under ``api/dashboard/``; records are maintained
through the Django admin.
"""
from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "Administracion de Granja Los Ares"
admin.site.site_title = "Administracion de Granja Los Ares"
admin.site.index_title = "Panel de administracion"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/dashboard/', include('reports.urls', namespace='reports')),
]
