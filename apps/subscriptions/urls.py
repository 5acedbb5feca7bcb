from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'subscriptions'

router = DefaultRouter()
router.register(r'', views.SubscriptionViewSet, basename='subscription')

urlpatterns = [
    # GET    /api/subscriptions/                          - Subscriptions of the user
    # POST   /api/subscriptions/                          - Create subscription
    # GET    /api/subscriptions/public/                   - Public marketplace
    # GET    /api/subscriptions/{id}/                     - Detail (members)
    # PUT    /api/subscriptions/{id}/                     - Update (owner)
    # DELETE /api/subscriptions/{id}/                     - Deactivate (owner)
    # GET    /api/subscriptions/{id}/members/             - List members
    # POST   /api/subscriptions/{id}/members/             - Add member (owner/admin)
    # PUT    /api/subscriptions/{id}/members/{user_id}/   - Update member role
    # DELETE /api/subscriptions/{id}/members/{user_id}/   - Remove member
    path('', include(router.urls)),
]
