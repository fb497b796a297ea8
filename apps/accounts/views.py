from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserProfileUpdateSerializer,
    UserSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    update_profile,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InactiveAccountError,
)


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SessionSerializer(serializers.Serializer):
    """Profile plus JWT pair returned after register/login."""
    user = UserSerializer()
    tokens = TokenPairSerializer()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()


def _session_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        },
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: SessionSerializer, 400: ErrorSerializer},
    description="Create an account and receive a JWT pair.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except EmailAlreadyRegisteredError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(_session_for(user), status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={200: SessionSerializer, 401: ErrorSerializer, 403: ErrorSerializer},
    description="Exchange email and password for a JWT pair.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(_session_for(user))


@extend_schema(
    request=UserProfileUpdateSerializer,
    responses={200: UserSerializer},
    description="Get (GET) or update (PATCH) the current user's profile.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    if request.method == 'PATCH':
        serializer = UserProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_profile(user=request.user, **serializer.validated_data)

    return Response(UserSerializer(request.user).data)
