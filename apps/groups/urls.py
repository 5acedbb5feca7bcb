from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # GET    /api/groups/                          - List user's groups
    # POST   /api/groups/                          - Create group
    # GET    /api/groups/{id}/                     - Group detail (members)
    # GET    /api/groups/{id}/members/             - List members
    # POST   /api/groups/{id}/members/             - Add member (owner/admin)
    # PUT    /api/groups/{id}/members/{user_id}/   - Update member role
    # DELETE /api/groups/{id}/members/{user_id}/   - Remove member
    # POST   /api/groups/{id}/invite/              - Invite by email
    # POST   /api/groups/{id}/join/                - Join with invite code
    path('', include(router.urls)),
]
