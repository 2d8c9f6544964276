from django.contrib import admin
from django.urls import path, include
from core.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('authx.urls')),
    path('api/admins/', include('users.urls')),
    path('api/', include('jobs.urls')),
    path('api/', include('teams.urls')),
    path('api/agenda/', include('agenda.urls')),
    path('api/', include('announcements.urls')),
    path("api/health/", HealthCheckView.as_view(), name="health-check"),
]
