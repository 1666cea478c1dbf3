from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ActivityViewSet

app_name = 'activities'

router = DefaultRouter()
router.register(r'', ActivityViewSet, basename='activity')

# Routes:
# GET    /api/activities/                                   -> list
# POST   /api/activities/                                   -> create
# GET    /api/activities/{id}/                              -> retrieve
# PUT    /api/activities/{id}/                              -> update
# DELETE /api/activities/{id}/                              -> destroy
# GET    /api/activities/{id}/participants/                 -> participants
# DELETE /api/activities/{id}/participants/{user_id}/       -> remove participant
# PATCH  /api/activities/{id}/participants/{user_id}/       -> set admin flag
# GET    /api/activities/{id}/tasks/                        -> tasks
# GET    /api/activities/{id}/expenses/                     -> expenses
# GET    /api/activities/{id}/expense_summary/              -> balances
# POST   /api/activities/{id}/mark_all_paid/                -> settle all shares
# PATCH  /api/activities/{id}/expenses/{e}/shares/{s}/mark_paid/
# PATCH  /api/activities/{id}/expenses/{e}/shares/{s}/unmark_paid/
# GET    /api/activities/{id}/invitations/                  -> invitations

urlpatterns = [
    path('', include(router.urls)),
]
