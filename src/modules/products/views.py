"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into the standardized
error body; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.error_handling import (
    error_response,
    pydantic_errors,
    validation_error_response,
)
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductNotFound, ProductNotOwned
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

_EDITABLE_FIELDS = ("name", "price", "stock", "description", "image")


def _not_found() -> Response:
    return error_response("Product not found.", status.HTTP_404_NOT_FOUND, code="not_found")


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Catalog browsing for everyone signed in, edits for owners.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    """

    filterset_class = ProductFilter
    ordering_fields = ["name", "price", "stock", "created_at"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Product.objects.none()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(self.get_serializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data
        try:
            dto = CreateProductDTO(
                name=data.get("name", ""),
                price=data.get("price", 0),
                stock=data.get("stock", 0),
                description=data.get("description", ""),
                image=data.get("image", ""),
            )
        except PydanticValidationError as exc:
            return validation_error_response(pydantic_errors(exc))

        try:
            product = self._service.create_product(get_identity(request.user), dto)
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")

        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        fields = {f: request.data.get(f) for f in _EDITABLE_FIELDS if f in request.data}
        try:
            dto = UpdateProductDTO(**fields)
        except PydanticValidationError as exc:
            return validation_error_response(pydantic_errors(exc))

        try:
            product = self._service.update_product(pk, get_identity(request.user), dto)
        except ProductNotFound:
            return _not_found()
        except ProductNotOwned as exc:
            return error_response(str(exc), status.HTTP_403_FORBIDDEN, code="not_owner")
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")

        return Response(self.get_serializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk, get_identity(request.user))
        except ProductNotFound:
            return _not_found()
        except ProductNotOwned as exc:
            return error_response(str(exc), status.HTTP_403_FORBIDDEN, code="not_owner")
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        return Response(status=status.HTTP_204_NO_CONTENT)
