from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ExpenseViewSet

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', ExpenseViewSet, basename='expense')

# Routes:
# GET    /api/expenses/?activity=<id>      -> list
# POST   /api/expenses/                    -> create
# GET    /api/expenses/my_outstanding/     -> unpaid shares I owe
# GET    /api/expenses/{id}/               -> retrieve
# PUT    /api/expenses/{id}/               -> update
# DELETE /api/expenses/{id}/               -> destroy
# Share payment lives under /api/activities/{id}/expenses/{id}/shares/{id}/

urlpatterns = [
    path('', include(router.urls)),
]
