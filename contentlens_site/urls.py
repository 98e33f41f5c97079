"""Root URL configuration for contentlens_site."""

from django.urls import include, path

urlpatterns = [
    path('api/', include('contentlens.urls')),
]
