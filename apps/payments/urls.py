from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # GET  /api/payments/?subscriptionId&status&limit  - History + summary
    # POST /api/payments/                              - Record payment
    path('', views.payments, name='list'),
]
