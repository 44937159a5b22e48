import logging

from django.conf import settings
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.payments.models import CoffeeType
from apps.payments.services import PaymentStore, StorageFailure
from . import reporting
from .exceptions import AnalyticsServiceError
from .serializers import (
    # Input serializers
    DashboardQuerySerializer,
    ReportQuerySerializer,
    # Response serializers
    DashboardResponseSerializer,
    ReportResponseSerializer,
    ErrorSerializer,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = list(CoffeeType.values)


def get_store():
    return PaymentStore()


def _storage_error(exc):
    logger.error("Failed to load payments for analytics: %s", exc, exc_info=exc)
    return Response({'error': 'Storage failure'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@extend_schema(
    parameters=[
        OpenApiParameter('now', OpenApiTypes.DATE, description='Reference date (YYYY-MM-DD), defaults to today'),
    ],
    responses={
        200: DashboardResponseSerializer,
        400: ErrorSerializer,
    },
    description="Sales totals, coffee type breakdown, monthly revenue and 30-day growth for the current user.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Dashboard statistics for the current user - thin HTTP handler."""
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    now = query_serializer.validated_data.get('now') or timezone.localdate()

    try:
        payments = get_store().find_all(request.user.id)
    except StorageFailure as e:
        return _storage_error(e)

    categories = getattr(settings, 'PAYMENT_CATEGORIES', None) or DEFAULT_CATEGORIES
    data = reporting.dashboard(payments, categories, now)

    return Response(DashboardResponseSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('month', OpenApiTypes.INT, description='Month 1-12 (optional)'),
        OpenApiParameter('year', OpenApiTypes.INT, description='Year (optional)'),
    ],
    responses={
        200: ReportResponseSerializer,
        400: ErrorSerializer,
    },
    description="Rows and totals for the spreadsheet export, optionally limited to one month.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request):
    """Export report for the current user - thin HTTP handler."""
    query_serializer = ReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        payments = get_store().find_all(request.user.id)
    except StorageFailure as e:
        return _storage_error(e)

    try:
        data = reporting.build_report(
            payments,
            timezone.localdate(),
            month=params.get('month'),
            year=params.get('year'),
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ReportResponseSerializer(data).data)
