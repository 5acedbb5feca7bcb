from django.urls import path
from . import views

app_name = 'credentials'

urlpatterns = [
    # POST   /api/credentials/                    - Store login / generate password
    path('', views.credentials, name='create'),
    # GET    /api/credentials/{subscription_id}/  - Read (members)
    # PUT    /api/credentials/{subscription_id}/  - Update (owner/admin)
    # DELETE /api/credentials/{subscription_id}/  - Delete (owner)
    path('<uuid:subscription_id>/', views.credential_detail, name='detail'),
]
