import pytest
from decimal import Decimal
from unittest.mock import patch
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from apps.payments.models import Payment
from apps.payments.services import StorageFailure


PAYLOAD = {
    'date': '2025-03-01',
    'coffee_type': 'Kopi Bubuk',
    'weight_kg': '1.5',
    'total_price': 199000,
}


def receipt(gif_bytes, name='nota.gif', content_type='image/gif'):
    return SimpleUploadedFile(name, gif_bytes, content_type=content_type)


# =============================================================================
# Authentication
# =============================================================================

@pytest.mark.django_db
class TestPaymentAuth:
    """Every payment endpoint requires a logged-in user."""

    def test_list_unauthenticated(self, api_client):
        response = api_client.get(reverse('payments:payment-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_unauthenticated(self, api_client):
        response = api_client.post(reverse('payments:payment-list'), PAYLOAD, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert Payment.objects.count() == 0

    def test_delete_unauthenticated(self, api_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = api_client.delete(url)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert Payment.objects.filter(id=payment.id).exists()


# =============================================================================
# List / Retrieve
# =============================================================================

@pytest.mark.django_db
class TestPaymentList:
    """Tests for GET /api/payments/"""

    def test_list_own_payments(self, cashier_client, payment, payment_with_receipt, foreign_payment):
        response = cashier_client.get(reverse('payments:payment-list'))

        assert response.status_code == status.HTTP_200_OK
        ids = [p['id'] for p in response.data]
        assert ids == [payment_with_receipt.id, payment.id]

    def test_list_shape(self, cashier_client, payment_with_receipt):
        response = cashier_client.get(reverse('payments:payment-list'))

        item = response.data[0]
        assert item['coffee_type'] == 'Kopi Bijian'
        assert Decimal(item['weight_kg']) == Decimal('2')
        assert item['total_price'] == 250000
        assert item['owner_email'] == 'cashier@example.com'
        assert item['image'] == payment_with_receipt.image
        assert item['image_url'] == f'http://testserver/media/{payment_with_receipt.image}'

    def test_list_empty(self, cashier_client):
        response = cashier_client.get(reverse('payments:payment-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_list_storage_failure(self, cashier_client):
        with patch('apps.payments.services.store.PaymentStore.find_all', side_effect=StorageFailure('db down')):
            response = cashier_client.get(reverse('payments:payment-list'))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == 'Storage failure'


@pytest.mark.django_db
class TestPaymentRetrieve:
    """Tests for GET /api/payments/{id}/"""

    def test_retrieve_own(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = cashier_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == payment.id
        assert response.data['image_url'] is None

    def test_retrieve_foreign_is_not_found(self, cashier_client, foreign_payment):
        url = reverse('payments:payment-detail', args=[foreign_payment.id])
        response = cashier_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Payment not found'

    def test_retrieve_missing_is_not_found(self, cashier_client):
        url = reverse('payments:payment-detail', args=[999999])
        response = cashier_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Payment not found'


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestPaymentCreate:
    """Tests for POST /api/payments/"""

    def test_create_json(self, cashier_client, cashier):
        response = cashier_client.post(reverse('payments:payment-list'), PAYLOAD, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        payment = Payment.objects.get(id=response.data['id'])
        assert payment.owner == cashier
        assert payment.total_price == 199000
        assert payment.weight_kg == Decimal('1.500')
        assert payment.image == ''

    def test_create_multipart_with_receipt(self, cashier_client, gif_bytes):
        data = dict(PAYLOAD, image=receipt(gif_bytes))
        response = cashier_client.post(reverse('payments:payment-list'), data, format='multipart')

        assert response.status_code == status.HTTP_201_CREATED
        key = response.data['image']
        assert key.startswith('uploads/receipt_')
        assert default_storage.exists(key)
        assert response.data['image_url'].endswith(key)

    def test_owner_cannot_be_chosen(self, cashier_client, cashier, other_cashier):
        data = dict(PAYLOAD, owner=other_cashier.id, owner_id=other_cashier.id)
        response = cashier_client.post(reverse('payments:payment-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Payment.objects.get(id=response.data['id']).owner == cashier

    def test_negative_weight_rejected(self, cashier_client):
        data = dict(PAYLOAD, weight_kg='-1')
        response = cashier_client.post(reverse('payments:payment-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'weight_kg' in response.data
        assert Payment.objects.count() == 0

    def test_negative_price_rejected(self, cashier_client):
        data = dict(PAYLOAD, total_price=-100)
        response = cashier_client.post(reverse('payments:payment-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'total_price' in response.data

    def test_price_above_column_range_rejected(self, cashier_client):
        data = dict(PAYLOAD, total_price=99999999999999999999)
        response = cashier_client.post(reverse('payments:payment-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'total_price' in response.data
        assert Payment.objects.count() == 0

    def test_weight_above_column_range_rejected(self, cashier_client):
        data = dict(PAYLOAD, weight_kg='100000000')
        response = cashier_client.post(reverse('payments:payment-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'weight_kg' in response.data
        assert Payment.objects.count() == 0

    def test_missing_fields_rejected(self, cashier_client):
        response = cashier_client.post(reverse('payments:payment-list'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        for field in ('date', 'coffee_type', 'weight_kg', 'total_price'):
            assert field in response.data

    def test_non_image_upload_rejected(self, cashier_client):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        data = dict(PAYLOAD, image=upload)
        response = cashier_client.post(reverse('payments:payment-list'), data, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'image' in response.data
        assert Payment.objects.count() == 0

    def test_oversized_upload_rejected(self, cashier_client, settings, gif_bytes):
        settings.PAYMENT_UPLOAD_MAX_BYTES = 10
        data = dict(PAYLOAD, image=receipt(gif_bytes))
        response = cashier_client.post(reverse('payments:payment-list'), data, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'image' in response.data

    def test_storage_failure(self, cashier_client):
        with patch('apps.payments.services.store.PaymentStore.create', side_effect=StorageFailure('db down')):
            response = cashier_client.post(reverse('payments:payment-list'), PAYLOAD, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == 'Storage failure'


# =============================================================================
# Update
# =============================================================================

@pytest.mark.django_db
class TestPaymentUpdate:
    """Tests for PUT/PATCH /api/payments/{id}/"""

    def test_patch_fields(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = cashier_client.patch(url, {'total_price': 210000}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_price'] == 210000
        payment.refresh_from_db()
        assert payment.total_price == 210000
        assert payment.coffee_type == 'Kopi Bubuk'

    def test_put_requires_all_fields(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = cashier_client.put(url, {'total_price': 1}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_put_replaces_fields(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        data = dict(PAYLOAD, coffee_type='Kopi Bijian', date='2025-04-10')
        response = cashier_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['coffee_type'] == 'Kopi Bijian'
        assert response.data['date'] == '2025-04-10'

    def test_replace_receipt_removes_old_file(self, cashier_client, payment_with_receipt, gif_bytes):
        old_key = payment_with_receipt.image
        url = reverse('payments:payment-detail', args=[payment_with_receipt.id])
        response = cashier_client.patch(url, {'image': receipt(gif_bytes, 'baru.png', 'image/png')}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        new_key = response.data['image']
        assert new_key != old_key
        assert new_key.endswith('.png')
        assert default_storage.exists(new_key)
        assert not default_storage.exists(old_key)

    def test_update_foreign_is_not_found(self, cashier_client, foreign_payment):
        url = reverse('payments:payment-detail', args=[foreign_payment.id])
        response = cashier_client.patch(url, {'total_price': 1}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        foreign_payment.refresh_from_db()
        assert foreign_payment.total_price == 100000

    def test_update_negative_weight_rejected(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = cashier_client.patch(url, {'weight_kg': '-2'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        payment.refresh_from_db()
        assert payment.weight_kg == Decimal('1.500')


# =============================================================================
# Delete
# =============================================================================

@pytest.mark.django_db
class TestPaymentDelete:
    """Tests for DELETE /api/payments/{id}/"""

    def test_delete_own(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        response = cashier_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Payment.objects.filter(id=payment.id).exists()

    def test_delete_removes_receipt(self, cashier_client, payment_with_receipt):
        key = payment_with_receipt.image
        url = reverse('payments:payment-detail', args=[payment_with_receipt.id])
        response = cashier_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not default_storage.exists(key)

    def test_delete_with_missing_receipt_file(self, cashier_client, payment_with_receipt):
        default_storage.delete(payment_with_receipt.image)
        url = reverse('payments:payment-detail', args=[payment_with_receipt.id])
        response = cashier_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_foreign_is_not_found(self, cashier_client, foreign_payment):
        url = reverse('payments:payment-detail', args=[foreign_payment.id])
        response = cashier_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Payment.objects.filter(id=foreign_payment.id).exists()

    def test_delete_twice(self, cashier_client, payment):
        url = reverse('payments:payment-detail', args=[payment.id])
        cashier_client.delete(url)
        response = cashier_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
