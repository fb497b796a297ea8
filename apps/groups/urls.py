from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List user's active groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details
    # PUT    /api/groups/{id}/         - Update group (admin)
    # PATCH  /api/groups/{id}/         - Partial update (admin)

    # Custom group actions
    # GET    /api/groups/{id}/members/            - List members
    # POST   /api/groups/{id}/leave/              - Leave group
    # POST   /api/groups/{id}/regenerate_invite/  - Regenerate invite code (admin)

    # Join by invite code
    path('join/<str:code>/', views.join_by_code, name='group-join'),

    # Include router URLs
    path('', include(router.urls)),
]
