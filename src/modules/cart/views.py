"""Cart API views.

Translates cart domain errors into the standardized error body.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.cart.dtos import AddToCartDTO
from modules.cart.exceptions import (
    CannotBuyOwnProduct,
    DuplicateItem,
    OutOfStock,
    RemovalFailed,
)
from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.serializers import CartEntrySerializer
from modules.cart.services import CartService
from modules.core.error_handling import (
    error_response,
    pydantic_errors,
    validation_error_response,
)
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository


class CartViewSet(ViewSet):
    """GET/POST /api/v1/cart/, DELETE /api/v1/cart/{id}/"""

    throttle_scope = "cart_write"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CartService(
            cart_repository=CartDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def list(self, request: Request) -> Response:
        entries = self._service.list_items(get_identity(request.user))
        return Response(CartEntrySerializer(entries, many=True).data)

    def create(self, request: Request) -> Response:
        try:
            dto = AddToCartDTO(product_id=request.data.get("product_id"))
        except PydanticValidationError as exc:
            return validation_error_response(pydantic_errors(exc))

        try:
            entry = self._service.add_item(get_identity(request.user), dto.product_id)
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        except ProductNotFound:
            return error_response(
                "Product not found.", status.HTTP_404_NOT_FOUND, code="not_found"
            )
        except CannotBuyOwnProduct as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST, code="own_product")
        except OutOfStock as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST, code="out_of_stock")
        except DuplicateItem as exc:
            return error_response(str(exc), status.HTTP_409_CONFLICT, code="duplicate_item")

        return Response(CartEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        try:
            self._service.remove_item(get_identity(request.user), pk)
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        except RemovalFailed as exc:
            return error_response(
                str(exc), status.HTTP_503_SERVICE_UNAVAILABLE, code="removal_failed"
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
