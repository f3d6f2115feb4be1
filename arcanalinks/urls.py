"""URL configuration for the arcanalinks app.

This module defines the URL patterns for the engine endpoints and sets the
``app_name`` used for namespacing from the project URL configuration.
"""

from django.urls import path

from . import views

app_name = 'arcanalinks'

urlpatterns = [
    path('scan/', views.scan, name='scan'),
    path('apply/', views.apply, name='apply'),
    path('render/', views.render, name='render'),
    path('validate/', views.validate, name='validate'),
]
