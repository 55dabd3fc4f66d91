# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # JSON API
    path('', include('apps.core.urls')),
    path('', include('apps.board.urls')),
]

# Admin titles
admin.site.site_header = 'Kanban Admin'
admin.site.site_title = 'Kanban'
admin.site.index_title = 'Administration'

handler404 = 'apps.core.views.not_found_view'
