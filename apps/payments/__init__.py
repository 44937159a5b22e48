"""
Payments App - Coffee Sales Ledger

This app records coffee sale transactions ("payments") for the cashier:
date, coffee type, weight in kilograms, total price in rupiah and an
optional receipt image.

Key Features:
- Owner-scoped CRUD for payment records
- Receipt image upload with cleanup of replaced/deleted files
- Record store adapter over the Django ORM, injectable into the service

Architecture:
- Models: Payment
- Services: PaymentStore, AttachmentManager, PaymentService
- Views: RESTful API with a ViewSet
- Exceptions: Domain exception hierarchy in services.exceptions
"""

__version__ = '1.0.0'
