"""
Domain exceptions for analytics app.

These are raised for invalid analytics queries, separate from HTTP
concerns. The reporting functions themselves never raise on a
well-formed record set.

Exception Hierarchy:
    AnalyticsServiceError (base)
    └── InvalidPeriodError

Usage:
    from apps.analytics.exceptions import InvalidPeriodError

    if not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be between 1 and 12")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics errors.

        try:
            report = build_report(...)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a report period is invalid.

    Example:
        raise InvalidPeriodError("Month must be between 1 and 12")
    """

    pass
