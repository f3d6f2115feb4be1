"""URL configuration for arcanalinks_tool.

The admin hosts the link registry and the editor login; the engine endpoints
live under ``/internal-links/``.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('internal-links/', include('arcanalinks.urls')),
]
