"""Profile API view: GET/PUT /api/v1/profile/"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.error_handling import (
    error_response,
    pydantic_errors,
    validation_error_response,
)
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity
from modules.profiles.dtos import UpdateProfileDTO
from modules.profiles.exceptions import ProfileNotFound
from modules.profiles.repositories.django_repository import ProfileDjangoRepository
from modules.profiles.serializers import UserProfileSerializer
from modules.profiles.services import ProfileService


class ProfileView(APIView):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProfileService(repository=ProfileDjangoRepository())

    def get(self, request: Request) -> Response:
        try:
            profile = self._service.get_profile(get_identity(request.user))
        except ProfileNotFound as exc:
            return error_response(str(exc), status.HTTP_404_NOT_FOUND, code="not_found")
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        return Response(UserProfileSerializer(profile).data)

    def put(self, request: Request) -> Response:
        fields = {
            key: request.data.get(key)
            for key in UpdateProfileDTO.model_fields
            if request.data.get(key) is not None
        }
        try:
            dto = UpdateProfileDTO(**fields)
        except PydanticValidationError as exc:
            return validation_error_response(pydantic_errors(exc))

        try:
            profile = self._service.update_profile(get_identity(request.user), dto)
        except Unauthenticated as exc:
            return error_response(str(exc), status.HTTP_401_UNAUTHORIZED, code="not_authenticated")
        return Response(UserProfileSerializer(profile).data)
