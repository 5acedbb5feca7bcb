from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('financial/', views.financial, name='financial'),
    path('alerts/', views.alerts, name='alerts'),
]
