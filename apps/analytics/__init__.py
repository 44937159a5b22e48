"""
Analytics App - Sales Dashboard and Report Export

Read-only views over the current user's payments.

Key Features:
- Revenue, weight and average transaction totals
- Revenue per coffee type (pie) and per calendar month (bar)
- 30-day growth against the preceding 30 days
- Month/year filtered report rows for the spreadsheet export

Architecture:
- Reporting: pure functions in reporting.py, fed by the payments record store
- Views: function-based API views with input serializers
- Exceptions: Domain exception hierarchy in exceptions.py
"""

__version__ = '1.0.0'
