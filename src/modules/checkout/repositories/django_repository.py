"""Django ORM implementation of the Checkout repository."""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.cart.selection import SelectedLine
from modules.checkout.models import CheckoutLine, CheckoutSession
from modules.checkout.repositories.interfaces import ICheckoutRepository
from modules.profiles.dtos import DeliveryPrefillDTO

logger = structlog.get_logger(__name__)


class CheckoutDjangoRepository(ICheckoutRepository):
    @transaction.atomic
    def create(
        self,
        buyer_id: str,
        lines: Sequence[SelectedLine],
        prefill: DeliveryPrefillDTO,
    ) -> CheckoutSession:
        session = CheckoutSession.objects.create(
            buyer_id=buyer_id,
            full_name=prefill.full_name,
            phone=prefill.phone,
            address=prefill.address,
            city=prefill.city,
            postal_code=prefill.postal_code,
        )
        CheckoutLine.objects.bulk_create(
            [
                CheckoutLine(
                    session=session,
                    position=position,
                    cart_entry_id=line.entry.id,
                    product_id=line.entry.product_id,
                    name=line.entry.name,
                    unit_price=line.entry.price,
                    image=line.entry.image,
                    quantity=line.quantity,
                )
                for position, line in enumerate(lines)
            ]
        )
        return session

    def get_for_buyer(self, buyer_id: str, session_id: str) -> Optional[CheckoutSession]:
        try:
            return (
                CheckoutSession.objects.prefetch_related("lines")
                .filter(id=session_id, buyer_id=buyer_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, buyer_id: str, session_id: str) -> Optional[CheckoutSession]:
        try:
            return (
                CheckoutSession.objects.select_for_update()
                .filter(id=session_id, buyer_id=buyer_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def lines_of(self, session: CheckoutSession) -> List[CheckoutLine]:
        return list(CheckoutLine.objects.filter(session=session).order_by("position"))

    def save(self, session: CheckoutSession) -> CheckoutSession:
        session.save()
        return session

    def delete(self, session: CheckoutSession) -> None:
        session_id = str(session.id)
        session.delete()
        logger.info("checkout.session_deleted", checkout_id=session_id)
