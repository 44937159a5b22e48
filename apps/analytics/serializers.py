"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - Output formatting of the reporting dataclasses

Input Serializers:
    DashboardQuerySerializer - Optional reference date
    ReportQuerySerializer - Optional month/year filter

Response Serializers:
    DashboardResponseSerializer - stats, pie_data, bar_data
    ReportResponseSerializer - Export rows and totals
"""

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DashboardQuerySerializer(serializers.Serializer):
    """
    Validate dashboard query parameters.

    Query Parameters:
        now (date): Reference date closing the growth window (default: today)
    """

    now = serializers.DateField(required=False)


class ReportQuerySerializer(serializers.Serializer):
    """
    Validate report query parameters.

    Query Parameters:
        month (int): Month 1-12
        year (int): Four-digit year
    """

    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)


# =============================================================================
# Response Serializers
# =============================================================================

class GrowthSerializer(serializers.Serializer):
    """Whole-percent change versus the previous 30 days."""
    total = serializers.IntegerField()
    kg = serializers.IntegerField()
    avg = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    total_kg = serializers.DecimalField(max_digits=22, decimal_places=3, coerce_to_string=False)
    avg = serializers.DecimalField(max_digits=21, decimal_places=2, coerce_to_string=False)
    growth = GrowthSerializer()


class CategoryTotalSerializer(serializers.Serializer):
    type = serializers.CharField()
    value = serializers.IntegerField()


class MonthTotalSerializer(serializers.Serializer):
    month = serializers.CharField()
    total = serializers.IntegerField()


class DashboardResponseSerializer(serializers.Serializer):
    """Serializer for the dashboard payload."""
    stats = DashboardStatsSerializer()
    pie_data = CategoryTotalSerializer(many=True)
    bar_data = MonthTotalSerializer(many=True)


class ReportRowSerializer(serializers.Serializer):
    no = serializers.IntegerField()
    date = serializers.DateField()
    coffee_type = serializers.CharField()
    weight_kg = serializers.DecimalField(max_digits=10, decimal_places=3, coerce_to_string=False)
    total_price = serializers.IntegerField()
    user = serializers.CharField()


class ReportResponseSerializer(serializers.Serializer):
    """Serializer for the export report handed to the spreadsheet writer."""
    title = serializers.CharField()
    filename = serializers.CharField()
    month = serializers.IntegerField(allow_null=True)
    year = serializers.IntegerField(allow_null=True)
    headers = serializers.ListField(child=serializers.CharField())
    rows = ReportRowSerializer(many=True)
    total_price = serializers.IntegerField()
    total_kg = serializers.DecimalField(max_digits=22, decimal_places=3, coerce_to_string=False)


class ErrorSerializer(serializers.Serializer):
    """Standard error response."""
    error = serializers.CharField()
