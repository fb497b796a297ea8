from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.serializers import UserMinimalSerializer


class GroupMemberSerializer(serializers.ModelSerializer):
    """Member information."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    creator = UserMinimalSerializer(read_only=True)
    members = serializers.SerializerMethodField()
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'icon',
            'invite_code',
            'creator',
            'members',
            'member_count',
            'user_role',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id', 'invite_code', 'creator', 'is_active', 'created_at', 'updated_at'
        ]

    def get_members(self, obj):
        memberships = obj.memberships.select_related('user').order_by('joined_at')
        return GroupMemberSerializer(memberships, many=True).data

    def get_member_count(self, obj):
        return obj.memberships.count()

    def get_user_role(self, obj):
        """Get current user's role in the group."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating groups."""

    class Meta:
        model = Group
        fields = ['name', 'description', 'icon']
        extra_kwargs = {'icon': {'required': False}}

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Group name is required')
        return value.strip()


class GroupUpdateSerializer(serializers.Serializer):
    """Partial update payload for a group."""

    name = serializers.CharField(max_length=50, required=False)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    creator = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'icon',
            'creator',
            'member_count',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        return obj.memberships.count()
