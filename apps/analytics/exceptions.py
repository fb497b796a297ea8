"""
Domain exceptions for analytics app.

Exception Hierarchy:
    AnalyticsServiceError (base)
    └── InvalidPeriodError
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    All domain-specific exceptions in the analytics app inherit from this
    class, making it easy to catch all analytics errors in views:

        try:
            report = InsightsEngine.compute_insights(user_id=user.id)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a month period is invalid.

    Example:
        raise InvalidPeriodError("Invalid month: 13")
    """

    pass
