from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Group
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    GroupListSerializer,
    GroupMemberSerializer,
)

from apps.groups.services import (
    create_group,
    update_group,
    join_group,
    leave_group,
    get_group_members,
    regenerate_invite_code,
    # Exceptions
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)


class GroupPagination(PageNumberPagination):
    """Twenty groups per page; clients may ask for up to 100."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """
    Groups visible to the requesting member.

    list: Get active groups the user is a member of
    create: Create a new group
    retrieve: Get a specific group
    update: Update a group (admin only)
    partial_update: Partially update a group (admin only)
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Return only groups where user is a member."""
        queryset = Group.objects.filter(
            memberships__user=self.request.user
        ).select_related('creator').prefetch_related('memberships').distinct()

        if self.action == 'list':
            queryset = queryset.filter(is_active=True)
        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action == 'create':
            return GroupCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return GroupUpdateSerializer
        return GroupSerializer

    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            creator=request.user,
            description=serializer.validated_data.get('description', ''),
            icon=serializer.validated_data.get('icon', ''),
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update group details."""
        serializer = GroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = update_group(
                group_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        group = self.get_object()
        memberships = get_group_members(group_id=group.id)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post', 'delete'])
    def leave(self, request, pk=None):
        """Leave a group."""
        try:
            group = leave_group(group_id=pk, user=request.user)
        except (GroupNotFoundError, NotMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            'message': 'Successfully left the group',
            'group_active': group.is_active,
        })

    @action(detail=True, methods=['post'])
    def regenerate_invite(self, request, pk=None):
        """Regenerate invite code (admin only)."""
        group = self.get_object()
        try:
            new_code = regenerate_invite_code(group_id=group.id, user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            'invite_code': new_code,
            'message': 'Invite code regenerated successfully'
        })


@extend_schema(
    request=None,
    responses={201: GroupSerializer},
    description="Join an active group using its invite code.",
    tags=['groups'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def join_by_code(request, code):
    """Join a group using invite code."""
    try:
        membership = join_group(invite_code=code, user=request.user)
    except InvalidInviteCodeError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except AlreadyMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    serializer = GroupSerializer(membership.group, context={'request': request})
    return Response(serializer.data, status=status.HTTP_201_CREATED)
