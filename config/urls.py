"""
URL configuration for the Cirends API.

Every endpoint lives under /api/; see each app's urls.py for its routes.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),

    # API endpoints
    path('api/users/', include('apps.accounts.user_urls')),
    path('api/activities/', include('apps.activities.urls')),
    path('api/tasks/', include('apps.tasks.urls')),
    path('api/expenses/', include('apps.expenses.urls')),
    path('api/invitations/', include('apps.invitations.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
