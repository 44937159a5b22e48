import logging

from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import PaymentInputSerializer, PaymentSerializer
from .services import (
    PaymentService,
    PaymentValidationError,
    PaymentNotFoundError,
    StorageFailure,
    AttachmentFailure,
)

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ViewSet):
    """
    ViewSet for the current user's payments.

    list: Get all own payments, newest date first
    create: Record a payment (JSON or multipart with an `image` receipt)
    retrieve: Get one own payment
    update: Replace fields, optionally with a new receipt
    partial_update: Change some fields, optionally with a new receipt
    destroy: Delete a payment and its receipt
    """

    permission_classes = [IsAuthenticated]
    serializer_class = PaymentSerializer

    def get_service(self):
        return PaymentService()

    def get_serializer_context(self):
        return {'request': self.request}

    def _output(self, payment, service, **kwargs):
        context = dict(self.get_serializer_context(), attachments=service.attachments)
        return PaymentSerializer(payment, context=context, **kwargs).data

    def _error(self, exc):
        """Translate a service exception into an error response."""
        if isinstance(exc, PaymentValidationError):
            return Response(
                {'error': str(exc), 'fields': exc.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        if isinstance(exc, PaymentNotFoundError):
            return Response({'error': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, AttachmentFailure):
            logger.error("Attachment failure: %s", exc, exc_info=exc)
            return Response(
                {'error': 'Could not store receipt image'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        logger.error("Storage failure: %s", exc, exc_info=exc)
        return Response({'error': 'Storage failure'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @extend_schema(responses={200: PaymentSerializer(many=True)}, tags=['payments'])
    def list(self, request):
        """List own payments, newest date first."""
        service = self.get_service()
        try:
            payments = service.get(request.user.id)
        except StorageFailure as e:
            return self._error(e)
        return Response(self._output(payments, service, many=True))

    @extend_schema(responses={200: PaymentSerializer}, tags=['payments'])
    def retrieve(self, request, pk=None):
        """Get a single own payment."""
        service = self.get_service()
        try:
            payment = service.get(request.user.id, pk)
        except (PaymentNotFoundError, StorageFailure) as e:
            return self._error(e)
        return Response(self._output(payment, service))

    @extend_schema(
        request=PaymentInputSerializer,
        responses={201: PaymentSerializer},
        tags=['payments'],
    )
    def create(self, request):
        """Record a new payment."""
        input_serializer = PaymentInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = dict(input_serializer.validated_data)
        image = data.pop('image', None)

        service = self.get_service()
        try:
            payment = service.create(
                request.user.id,
                attachment=image,
                attachment_name=image.name if image else '',
                **data
            )
        except (PaymentValidationError, AttachmentFailure, StorageFailure) as e:
            return self._error(e)

        return Response(self._output(payment, service), status=status.HTTP_201_CREATED)

    @extend_schema(
        request=PaymentInputSerializer,
        responses={200: PaymentSerializer},
        tags=['payments'],
    )
    def update(self, request, pk=None, partial=False):
        """Update a payment; a new `image` replaces the old receipt."""
        input_serializer = PaymentInputSerializer(data=request.data, partial=partial)
        input_serializer.is_valid(raise_exception=True)
        data = dict(input_serializer.validated_data)
        image = data.pop('image', None)

        service = self.get_service()
        try:
            payment = service.update(
                request.user.id,
                pk,
                attachment=image,
                attachment_name=image.name if image else '',
                **data
            )
        except (PaymentValidationError, PaymentNotFoundError, StorageFailure) as e:
            return self._error(e)

        return Response(self._output(payment, service))

    @extend_schema(
        request=PaymentInputSerializer,
        responses={200: PaymentSerializer},
        tags=['payments'],
    )
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(responses={204: None}, tags=['payments'])
    def destroy(self, request, pk=None):
        """Delete a payment and its receipt."""
        service = self.get_service()
        try:
            service.delete(request.user.id, pk)
        except (PaymentNotFoundError, StorageFailure) as e:
            return self._error(e)

        return Response(status=status.HTTP_204_NO_CONTENT)
