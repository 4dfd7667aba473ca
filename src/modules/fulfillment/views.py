"""Seller fulfillment API: received order lines and rollup metrics."""

from __future__ import annotations

from rest_framework import status
from rest_framework.generics import ListAPIView
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.error_handling import error_response
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.fulfillment.repositories.django_repository import FulfillmentDjangoRepository
from modules.fulfillment.serializers import ReceivedItemSerializer, SellerSummarySerializer
from modules.fulfillment.services import FulfillmentService
from modules.orders.models import OrderItem


class ReceivedOrdersView(ListAPIView):
    """GET /api/v1/fulfillment/orders/ (paginated)."""

    serializer_class = ReceivedItemSerializer
    throttle_scope = "order_listing"

    def get_queryset(self):
        user_id = get_identity(self.request.user)
        if not user_id:
            return OrderItem.objects.none()
        return FulfillmentService(FulfillmentDjangoRepository()).list_received(user_id)


class SellerSummaryView(APIView):
    """GET /api/v1/fulfillment/summary/"""

    def get(self, request: Request) -> Response:
        service = FulfillmentService(FulfillmentDjangoRepository())
        try:
            summary = service.get_summary(get_identity(request.user))
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        return Response(SellerSummarySerializer(summary).data)
