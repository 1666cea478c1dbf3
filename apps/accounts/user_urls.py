from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import UserViewSet

app_name = 'users'

router = DefaultRouter()
router.register(r'', UserViewSet, basename='user')

# Routes:
# GET    /api/users/                       -> list (admin)
# GET    /api/users/profile/               -> current user
# GET    /api/users/statistics/            -> system statistics (admin)
# GET    /api/users/activities/            -> all activities (admin)
# GET    /api/users/{id}/                  -> retrieve
# PUT    /api/users/{id}/                  -> update (self or admin)
# DELETE /api/users/{id}/                  -> delete (admin)
# PUT    /api/users/{id}/role/             -> change role (admin)
# PUT    /api/users/{id}/toggle_active/    -> toggle active (admin)

urlpatterns = [
    path('', include(router.urls)),
]
