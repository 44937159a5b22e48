"""
Tests for analytics input serializers.
"""
import pytest
from datetime import date
from apps.analytics.serializers import (
    DashboardQuerySerializer,
    ReportQuerySerializer,
)


class TestDashboardQuerySerializer:
    """Test DashboardQuerySerializer validation."""

    def test_no_params(self):
        serializer = DashboardQuerySerializer(data={})
        assert serializer.is_valid()
        assert serializer.validated_data.get('now') is None

    def test_valid_now(self):
        serializer = DashboardQuerySerializer(data={'now': '2025-03-31'})
        assert serializer.is_valid()
        assert serializer.validated_data['now'] == date(2025, 3, 31)

    def test_invalid_now(self):
        serializer = DashboardQuerySerializer(data={'now': '31/03/2025'})
        assert not serializer.is_valid()
        assert 'now' in serializer.errors


class TestReportQuerySerializer:
    """Test ReportQuerySerializer validation."""

    def test_no_params(self):
        serializer = ReportQuerySerializer(data={})
        assert serializer.is_valid()

    def test_month_and_year(self):
        serializer = ReportQuerySerializer(data={'month': '3', 'year': '2025'})
        assert serializer.is_valid()
        assert serializer.validated_data == {'month': 3, 'year': 2025}

    @pytest.mark.parametrize('month', ['0', '13', 'maret'])
    def test_invalid_month(self, month):
        serializer = ReportQuerySerializer(data={'month': month})
        assert not serializer.is_valid()
        assert 'month' in serializer.errors

    def test_invalid_year(self):
        serializer = ReportQuerySerializer(data={'year': '99'})
        assert not serializer.is_valid()
        assert 'year' in serializer.errors
