from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .exceptions import InvalidPeriodError
from .insights import InsightsEngine
from .serializers import (
    InsightsQuerySerializer,
    InsightsReportSerializer,
    ErrorSerializer,
)


@extend_schema(
    parameters=[
        OpenApiParameter('period', OpenApiTypes.STR, description='Month period (YYYY-MM), defaults to current month'),
    ],
    responses={
        200: InsightsReportSerializer,
        400: ErrorSerializer,
    },
    description="Get month-over-month spending insights and budget alerts for the current user.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def insights(request):
    """Spending report and insights for one calendar month."""
    query_serializer = InsightsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        report = InsightsEngine.compute_insights(
            user_id=request.user.id,
            now=query_serializer.validated_data.get('now')
        )
    except InvalidPeriodError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(InsightsReportSerializer(report).data)
