# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API
    path('', include('apps.core.urls')),
    path('api/tasks/', include('apps.tasks.urls')),
]

# Static files in development
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

    # Debug Toolbar when available
    try:
        import debug_toolbar

        urlpatterns = [
                          path('__debug__/', include(debug_toolbar.urls)),
                      ] + urlpatterns
    except ImportError:
        pass

# Admin titles
admin.site.site_header = 'Taskflow Admin'
admin.site.site_title = 'Taskflow'
admin.site.index_title = 'System administration'
