"""
Threadline URL Configuration
"""
from django.contrib import admin
from django.urls import path, include, re_path

from social.views import HealthView, RouteNotFoundView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('social.urls')),
    path('test', HealthView.as_view(), name='health'),
    # Anything else
    re_path(r'^.*$', RouteNotFoundView.as_view(), name='route-not-found'),
]
