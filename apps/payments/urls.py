from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # GET    /api/payments/         - List own payments (date desc)
    # POST   /api/payments/         - Record payment (JSON or multipart)
    # GET    /api/payments/{id}/    - Get payment
    # PUT    /api/payments/{id}/    - Update payment
    # PATCH  /api/payments/{id}/    - Partial update
    # DELETE /api/payments/{id}/    - Delete payment and receipt
    path('', include(router.urls)),
]
