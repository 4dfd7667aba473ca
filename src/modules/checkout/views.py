"""Checkout API views.

Every checkout domain error becomes a standardized error body; the
status mapping lives in ``_checkout_error``.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.checkout.dtos import StartCheckoutDTO
from modules.checkout.exceptions import (
    CheckoutFailed,
    CheckoutNotFound,
    EmptySelection,
    InsufficientStock,
    InvalidCheckoutStep,
    ProductUnavailable,
    ValidationFailed,
)
from modules.checkout.repositories.django_repository import CheckoutDjangoRepository
from modules.checkout.serializers import CheckoutSessionSerializer
from modules.checkout.services import CheckoutService
from modules.core.error_handling import (
    error_response,
    pydantic_errors,
    validation_error_response,
)
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.profiles.repositories.django_repository import ProfileDjangoRepository
from modules.profiles.services import ProfileService

CHECKOUT_ERRORS = (
    Unauthenticated,
    EmptySelection,
    ValidationFailed,
    CheckoutNotFound,
    InvalidCheckoutStep,
    ProductUnavailable,
    InsufficientStock,
    CheckoutFailed,
)


def _checkout_error(exc: Exception) -> Response:
    if isinstance(exc, ValidationFailed):
        return validation_error_response(exc.errors)
    if isinstance(exc, Unauthenticated):
        return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
    if isinstance(exc, CheckoutNotFound):
        return error_response("Checkout not found.", status.HTTP_404_NOT_FOUND, code="not_found")
    if isinstance(exc, EmptySelection):
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST, code="empty_selection")
    if isinstance(exc, InvalidCheckoutStep):
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST, code="invalid_step")
    if isinstance(exc, ProductUnavailable):
        return error_response(str(exc), status.HTTP_409_CONFLICT, code="product_unavailable")
    if isinstance(exc, InsufficientStock):
        return error_response(str(exc), status.HTTP_409_CONFLICT, code="insufficient_stock")
    return error_response(str(exc), status.HTTP_503_SERVICE_UNAVAILABLE, code="checkout_failed")


class CheckoutViewSet(ViewSet):
    """POST /checkout/ starts; the step actions advance the session."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CheckoutService(
            checkout_repository=CheckoutDjangoRepository(),
            cart_repository=CartDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            order_service=OrderService(order_repository=OrderDjangoRepository()),
            profile_service=ProfileService(repository=ProfileDjangoRepository()),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "checkout_submit" if self.action == "submit" else None
        return super().get_throttles()

    def _render(self, buyer_id: str, session_id) -> Response:
        session = self._service.get(buyer_id, str(session_id))
        return Response(CheckoutSessionSerializer(session).data)

    def create(self, request: Request) -> Response:
        try:
            dto = StartCheckoutDTO(selections=request.data.get("selections") or [])
        except PydanticValidationError as exc:
            return validation_error_response(pydantic_errors(exc))

        buyer_id = get_identity(request.user)
        try:
            session = self._service.start(buyer_id, dto)
            response = self._render(buyer_id, session.id)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)
        response.status_code = status.HTTP_201_CREATED
        return response

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            return self._render(get_identity(request.user), pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        try:
            self._service.cancel(get_identity(request.user), pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"])
    def delivery(self, request: Request, pk: str | None = None) -> Response:
        buyer_id = get_identity(request.user)
        try:
            self._service.submit_delivery(buyer_id, pk, request.data)
            return self._render(buyer_id, pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)

    @action(detail=True, methods=["put"])
    def payment(self, request: Request, pk: str | None = None) -> Response:
        buyer_id = get_identity(request.user)
        try:
            self._service.submit_payment(buyer_id, pk, request.data)
            return self._render(buyer_id, pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)

    @action(detail=True, methods=["post"])
    def back(self, request: Request, pk: str | None = None) -> Response:
        buyer_id = get_identity(request.user)
        try:
            self._service.back(buyer_id, pk)
            return self._render(buyer_id, pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)

    @action(detail=True, methods=["post"])
    def submit(self, request: Request, pk: str | None = None) -> Response:
        """Runs the submission protocol; returns the placed order."""
        try:
            order = self._service.submit(get_identity(request.user), pk)
        except CHECKOUT_ERRORS as exc:
            return _checkout_error(exc)
        order = OrderDjangoRepository().get_by_id(str(order.id)) or order
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
