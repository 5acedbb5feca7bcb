from django.urls import path
from . import views

app_name = 'access_requests'

urlpatterns = [
    # GET  /api/access-requests/?type=sent|received  - List requests
    # POST /api/access-requests/                     - Request to join
    path('', views.access_requests, name='list'),
    # PUT  /api/access-requests/{id}/approve/        - Approve (owner)
    path('<uuid:pk>/approve/', views.approve, name='approve'),
    # PUT  /api/access-requests/{id}/reject/         - Reject (owner)
    path('<uuid:pk>/reject/', views.reject, name='reject'),
]
