"""
URL configuration for preplaced_backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from django.views.generic import TemplateView
from rest_framework_simplejwt.views import TokenRefreshView

from core.auth import PreplacedAdminTokenObtainPairView, PreplacedTokenObtainPairView
from core.schema import PreplacedSchemaView


def api_root(_request):
    return JsonResponse({
        'status': 'ok',
        'message': 'Preplaced backend is running',
        'docs': '/api/docs/',
    })


urlpatterns = [
    path('', api_root, name='api_root'),
    path('admin/', admin.site.urls),
    path('api/auth/sign-in/', PreplacedTokenObtainPairView.as_view(), name='api_sign_in'),
    path('api/admin/login/', PreplacedAdminTokenObtainPairView.as_view(), name='api_admin_login'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/schema/', PreplacedSchemaView.as_view(), name='api-schema'),
    path('api/docs/', TemplateView.as_view(template_name='swagger-ui.html'), name='api-docs'),
    path('api/', include('core.urls')),
]
