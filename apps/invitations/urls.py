from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import InvitationViewSet

app_name = 'invitations'

router = DefaultRouter()
router.register(r'', InvitationViewSet, basename='invitation')

# Routes:
# GET    /api/invitations/                 -> my invitations
# POST   /api/invitations/                 -> invite a user
# GET    /api/invitations/pending/         -> my pending invitations
# GET    /api/invitations/sent/            -> invitations I sent
# GET    /api/invitations/{id}/            -> retrieve
# POST   /api/invitations/{id}/respond/    -> {"accept": bool}
# POST   /api/invitations/{id}/accept/
# POST   /api/invitations/{id}/reject/
# POST   /api/invitations/{id}/cancel/
# Activity invitations: GET /api/activities/{id}/invitations/

urlpatterns = [
    path('', include(router.urls)),
]
