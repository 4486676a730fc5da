from django.urls import path, include
from rest_framework.routers import DefaultRouter
from logistics.views import JobViewSet

router = DefaultRouter()
router.register(r'jobs', JobViewSet, basename='job')

urlpatterns = [
    path('api/', include(router.urls)),
]
