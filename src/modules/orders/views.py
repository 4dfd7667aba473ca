"""Order API views: buyer tracking plus the two status transitions.

Domain exceptions are caught and translated into the standardized error
body; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.error_handling import error_response
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.orders.exceptions import (
    InvalidTransition,
    NotOrderSeller,
    OrderNotFound,
    UpdateFailed,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService


def _transition_error(exc: Exception) -> Response:
    if isinstance(exc, OrderNotFound):
        return error_response("Order not found.", status.HTTP_404_NOT_FOUND, code="not_found")
    if isinstance(exc, NotOrderSeller):
        return error_response(str(exc), status.HTTP_403_FORBIDDEN, code="not_order_seller")
    if isinstance(exc, InvalidTransition):
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST, code="invalid_transition")
    if isinstance(exc, Unauthenticated):
        return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
    return error_response(str(exc), status.HTTP_503_SERVICE_UNAVAILABLE, code="update_failed")


class OrderViewSet(GenericViewSet):
    """GET /orders/, GET /orders/{id}/, POST /orders/{id}/ship|complete/

    Uses ``OrderService`` with the Django repository (DIP).
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(order_repository=OrderDjangoRepository())

    def get_throttles(self) -> list[BaseThrottle]:
        if self.action in {"list", "retrieve"}:
            self.throttle_scope = "order_listing"
        else:
            self.throttle_scope = None
        return super().get_throttles()

    def get_queryset(self):
        user_id = get_identity(self.request.user)
        if not user_id:
            return Order.objects.none()
        return self._service.list_orders(user_id)

    def list(self, request: Request) -> Response:
        """Paginated, newest first; filters from ``OrderFilter``."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            order = self._service.get_order(pk, get_identity(request.user))
        except (OrderNotFound, Unauthenticated) as exc:
            return _transition_error(exc)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["post"])
    def ship(self, request: Request, pk: str | None = None) -> Response:
        """Seller confirms the order has been shipped."""
        try:
            order = self._service.mark_shipped(pk, get_identity(request.user))
        except (OrderNotFound, NotOrderSeller, InvalidTransition, UpdateFailed, Unauthenticated) as exc:
            return _transition_error(exc)
        return Response(self.get_serializer(self._reload(order)).data)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """Buyer confirms receipt."""
        try:
            order = self._service.mark_completed(pk, get_identity(request.user))
        except (OrderNotFound, InvalidTransition, UpdateFailed, Unauthenticated) as exc:
            return _transition_error(exc)
        return Response(self.get_serializer(self._reload(order)).data)

    @staticmethod
    def _reload(order: Order) -> Order:
        return OrderDjangoRepository().get_by_id(str(order.id)) or order
