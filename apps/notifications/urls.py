from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    # GET  /api/notifications/                 - List (unreadOnly, type, limit)
    # POST /api/notifications/                 - Create for self
    path('', views.notifications, name='list'),
    # GET  /api/notifications/automation/      - Health probe
    # POST /api/notifications/automation/      - Run checks (AUTOMATION_SECRET)
    path('automation/', views.automation, name='automation'),
    # PUT  /api/notifications/{id}/read/       - Mark as read
    path('<uuid:pk>/read/', views.mark_read, name='mark-read'),
]
