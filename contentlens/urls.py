"""URL configuration for the contentlens app.

This module defines the URL patterns for the API views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'contentlens'

urlpatterns = [
    path('health/', views.health, name='health'),
    path('detect/', views.detect, name='detect'),
    path('topics/', views.topics, name='topics'),
    path('links/suggest/', views.suggest, name='suggest_links'),
]
