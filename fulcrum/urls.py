"""
Fulcrum Activity Admin - URL Configuration
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.views.generic import RedirectView

urlpatterns = [
    # Admin site
    path('admin/', admin.site.urls),

    # Home goes straight to the activity list
    path('', RedirectView.as_view(pattern_name='activities:activity_list', permanent=False), name='home'),

    # Apps
    path('accounts/', include('fulcrum.accounts.urls')),
    path('activities/', include('fulcrum.activities.urls')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Customize admin site
admin.site.site_header = 'Fulcrum Activity Admin'
admin.site.site_title = 'Fulcrum Admin'
admin.site.index_title = 'Activity Catalog Administration'
