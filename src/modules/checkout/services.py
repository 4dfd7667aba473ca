"""Checkout service layer (Use Cases).

Drives a buyer through ``delivery -> payment -> review -> submitting``
and ends in ``completed`` or ``failed``.

Submission protocol, in line order, inside one database transaction:

1. lock the selected cart entries, all of which must still exist;
2. re-read every selected product (no cached stock);
3. decrement each product's stock with a conditional update;
4. place the order at the cart snapshot prices;
5. delete the selected cart entries.

Any error rolls the whole batch back and leaves the session ``failed``
with the reason, ready for a manual retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional

import structlog
from django.db import transaction
from pydantic import ValidationError as PydanticValidationError

from modules.cart.exceptions import CartEntryNotFound
from modules.cart.selection import CartSelection
from modules.checkout.constants import (
    BACK_STEPS,
    CHECKOUT_FAILED_MESSAGE,
    NON_CANCELLABLE_STEPS,
    CheckoutStep,
)
from modules.checkout.dtos import (
    DELIVERY_ERROR,
    METHOD_ERROR,
    STALE_SELECTION_ERROR,
    payment_adapter,
)
from modules.checkout.exceptions import (
    CheckoutFailed,
    CheckoutNotFound,
    EmptySelection,
    InsufficientStock,
    InvalidCheckoutStep,
    ProductUnavailable,
    ValidationFailed,
)
from modules.core.error_handling import pydantic_errors
from modules.core.identity import require_identity
from modules.orders.constants import PaymentMethod
from modules.orders.dtos import DeliveryDetailsDTO, OrderLineDTO, PlaceOrderDTO
from modules.profiles.dtos import DeliveryPrefillDTO

if TYPE_CHECKING:
    from modules.cart.repositories.interfaces import ICartRepository
    from modules.checkout.dtos import StartCheckoutDTO
    from modules.checkout.models import CheckoutLine, CheckoutSession
    from modules.checkout.repositories.interfaces import ICheckoutRepository
    from modules.orders.models import Order
    from modules.orders.services import OrderService
    from modules.products.repositories.interfaces import IProductRepository
    from modules.profiles.services import ProfileService

logger = structlog.get_logger(__name__)


def _payment_errors(exc: PydanticValidationError) -> List[dict]:
    # Drop the union tag from error locations: ("card", "cvv") -> "cvv".
    errors = []
    for err in pydantic_errors(exc):
        attr = err["attr"]
        if attr and "." in attr:
            attr = attr.split(".", 1)[1]
        elif attr in PaymentMethod.values:
            attr = None
        errors.append({"attr": attr, "detail": err["detail"]})
    return errors


class CheckoutService:
    """Application service for the checkout workflow.

    Collaborators are injected (DIP): the session, cart and product
    repositories, the order service that owns the ledger, and the
    profile service used for delivery prefill.
    """

    def __init__(
        self,
        checkout_repository: ICheckoutRepository,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
        order_service: OrderService,
        profile_service: Optional[ProfileService] = None,
    ) -> None:
        self._checkout_repo = checkout_repository
        self._cart_repo = cart_repository
        self._product_repo = product_repository
        self._order_service = order_service
        self._profile_service = profile_service

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def start(self, buyer_id: Optional[str], dto: StartCheckoutDTO) -> CheckoutSession:
        """Open a session for the selected cart entries.

        Raises:
            Unauthenticated: no signed-in user.
            EmptySelection: nothing selected.
            ValidationFailed: a selected entry is not in the caller's cart.
        """
        buyer_id = require_identity(buyer_id)
        if not dto.selections:
            raise EmptySelection("Please select at least one item to check out.")

        selection = CartSelection(self._cart_repo.list_for_user(buyer_id))
        for chosen in dto.selections:
            try:
                selection.select(chosen.entry_id)
                if chosen.quantity is not None:
                    selection.set_quantity(chosen.entry_id, chosen.quantity)
            except CartEntryNotFound as exc:
                raise ValidationFailed(
                    STALE_SELECTION_ERROR,
                    [{"attr": "selections", "detail": str(exc)}],
                ) from exc

        session = self._checkout_repo.create(
            buyer_id, selection.selected_entries, self._prefill(buyer_id)
        )
        logger.info(
            "checkout.started",
            checkout_id=str(session.id),
            buyer_id=buyer_id,
            line_count=len(selection),
            total=str(selection.total),
        )
        return session

    @transaction.atomic
    def submit_delivery(
        self, buyer_id: Optional[str], session_id: str, data: Mapping[str, Any]
    ) -> CheckoutSession:
        """``delivery -> payment`` once every required field is filled."""
        session = self._get_locked(buyer_id, session_id)
        self._require_move(session, CheckoutStep.PAYMENT, from_steps={CheckoutStep.DELIVERY})
        try:
            details = DeliveryDetailsDTO(**{k: v for k, v in data.items() if v is not None})
        except PydanticValidationError as exc:
            logger.info("checkout.delivery_rejected", checkout_id=str(session.id))
            raise ValidationFailed(DELIVERY_ERROR, pydantic_errors(exc)) from exc

        session.apply_delivery(details)
        session.step = CheckoutStep.PAYMENT
        self._checkout_repo.save(session)
        logger.info("checkout.delivery_accepted", checkout_id=str(session.id))
        return session

    @transaction.atomic
    def submit_payment(
        self, buyer_id: Optional[str], session_id: str, data: Mapping[str, Any]
    ) -> CheckoutSession:
        """``payment -> review`` once the method-specific fields are valid."""
        session = self._get_locked(buyer_id, session_id)
        self._require_move(session, CheckoutStep.REVIEW, from_steps={CheckoutStep.PAYMENT})

        if data.get("method") not in PaymentMethod.values:
            raise ValidationFailed(METHOD_ERROR, [{"attr": "method", "detail": METHOD_ERROR}])
        try:
            payment = payment_adapter.validate_python(dict(data))
        except PydanticValidationError as exc:
            errors = _payment_errors(exc)
            logger.info(
                "checkout.payment_rejected",
                checkout_id=str(session.id),
                method=data.get("method"),
            )
            raise ValidationFailed(errors[0]["detail"], errors) from exc

        session.apply_payment(payment.to_summary())
        session.step = CheckoutStep.REVIEW
        self._checkout_repo.save(session)
        logger.info(
            "checkout.payment_accepted",
            checkout_id=str(session.id),
            method=session.payment_method,
        )
        return session

    @transaction.atomic
    def back(self, buyer_id: Optional[str], session_id: str) -> CheckoutSession:
        session = self._get_locked(buyer_id, session_id)
        previous = BACK_STEPS.get(session.step)
        if previous is None:
            raise InvalidCheckoutStep(f"Cannot go back from the {session.step} step.")
        session.step = previous
        self._checkout_repo.save(session)
        return session

    @transaction.atomic
    def cancel(self, buyer_id: Optional[str], session_id: str) -> None:
        """Discard the session; nothing outside it has been touched yet."""
        session = self._get_locked(buyer_id, session_id)
        if session.step in NON_CANCELLABLE_STEPS:
            raise InvalidCheckoutStep(f"A {session.step} checkout cannot be cancelled.")
        self._checkout_repo.delete(session)
        logger.info("checkout.cancelled", buyer_id=buyer_id)

    def get(self, buyer_id: Optional[str], session_id: str) -> CheckoutSession:
        buyer_id = require_identity(buyer_id)
        session = self._checkout_repo.get_for_buyer(buyer_id, session_id)
        if not session:
            raise CheckoutNotFound(f"Checkout {session_id} not found.")
        return session

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self, buyer_id: Optional[str], session_id: str) -> Order:
        """Place the order for a reviewed (or failed) session.

        Raises:
            Unauthenticated: no signed-in user.
            CheckoutNotFound: no such session for the caller.
            InvalidCheckoutStep: not in ``review``/``failed`` (double submit).
            ProductUnavailable: a selected product no longer exists.
            InsufficientStock: a selected product has too little stock.
            ValidationFailed: a selected entry is no longer in the cart.
            CheckoutFailed: anything else went wrong.
        """
        buyer_id = require_identity(buyer_id)
        session = self._begin_submission(buyer_id, session_id)
        log = logger.bind(checkout_id=str(session.id), buyer_id=buyer_id)

        try:
            order = self._run_submission(session)
        except (ProductUnavailable, InsufficientStock, ValidationFailed) as exc:
            log.warning("checkout.submission_rejected", reason=str(exc))
            self._finish(session, CheckoutStep.FAILED, failure_reason=str(exc))
            raise
        except Exception as exc:
            log.exception("checkout.submission_failed")
            self._finish(session, CheckoutStep.FAILED, failure_reason=CHECKOUT_FAILED_MESSAGE)
            raise CheckoutFailed(CHECKOUT_FAILED_MESSAGE) from exc

        self._finish(session, CheckoutStep.COMPLETED, order=order)
        self._remember_delivery(buyer_id, session)
        log.info(
            "checkout.submitted",
            order_id=str(order.id),
            order_number=order.order_number,
            total=str(order.total_amount),
        )
        return order

    def _begin_submission(self, buyer_id: str, session_id: str) -> CheckoutSession:
        with transaction.atomic():
            session = self._get_locked(buyer_id, session_id)
            if not session.can_move_to(CheckoutStep.SUBMITTING):
                raise InvalidCheckoutStep(
                    "This checkout is already being submitted."
                    if session.step == CheckoutStep.SUBMITTING
                    else f"Cannot submit a checkout in the {session.step} step."
                )
            session.step = CheckoutStep.SUBMITTING
            session.failure_reason = ""
            self._checkout_repo.save(session)
        return session

    def _run_submission(self, session: CheckoutSession) -> Order:
        with transaction.atomic():
            lines = self._checkout_repo.lines_of(session)
            entry_ids = {str(line.cart_entry_id) for line in lines}
            if self._cart_repo.lock_entries(session.buyer_id, entry_ids) != len(entry_ids):
                # An entry was removed or bought through another checkout.
                raise ValidationFailed(
                    STALE_SELECTION_ERROR,
                    [{"attr": "selections", "detail": STALE_SELECTION_ERROR}],
                )

            for line in lines:
                product = self._product_repo.get_by_id(str(line.product_id))
                if not product:
                    raise ProductUnavailable(f'Product "{line.name}" is no longer available.')
                if product.stock < line.quantity:
                    raise InsufficientStock(f'Not enough stock for "{line.name}".')

            for line in lines:
                if not self._product_repo.decrement_stock(str(line.product_id), line.quantity):
                    # Another checkout took the stock after the check above.
                    raise InsufficientStock(f'Not enough stock for "{line.name}".')

            order = self._order_service.place_order(
                PlaceOrderDTO(
                    buyer_id=session.buyer_id,
                    lines=[self._order_line(line) for line in lines],
                    delivery=session.delivery_details(),
                    payment=session.payment_summary(),
                )
            )

            self._cart_repo.delete_many(
                session.buyer_id, [str(line.cart_entry_id) for line in lines]
            )
        return order

    @staticmethod
    def _order_line(line: CheckoutLine) -> OrderLineDTO:
        return OrderLineDTO(
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            image=line.image,
        )

    def _finish(
        self,
        session: CheckoutSession,
        step: str,
        failure_reason: str = "",
        order: Optional[Order] = None,
    ) -> None:
        session.step = step
        session.failure_reason = failure_reason
        if order is not None:
            session.order = order
        self._checkout_repo.save(session)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_locked(self, buyer_id: Optional[str], session_id: str) -> CheckoutSession:
        buyer_id = require_identity(buyer_id)
        session = self._checkout_repo.get_for_update(buyer_id, session_id)
        if not session:
            raise CheckoutNotFound(f"Checkout {session_id} not found.")
        return session

    @staticmethod
    def _require_move(session: CheckoutSession, target: str, from_steps: set[str]) -> None:
        if session.step not in from_steps or not session.can_move_to(target):
            raise InvalidCheckoutStep(
                f"Cannot move from the {session.step} step to the {target} step."
            )

    def _prefill(self, buyer_id: str) -> DeliveryPrefillDTO:
        if self._profile_service is None:
            return DeliveryPrefillDTO()
        try:
            with transaction.atomic():
                return self._profile_service.delivery_prefill(buyer_id)
        except Exception:
            logger.exception("checkout.prefill_failed", buyer_id=buyer_id)
            return DeliveryPrefillDTO()

    def _remember_delivery(self, buyer_id: str, session: CheckoutSession) -> None:
        if self._profile_service is None:
            return
        try:
            with transaction.atomic():
                self._profile_service.remember_delivery(buyer_id, session.delivery_details())
        except Exception:
            logger.exception("checkout.remember_delivery_failed", buyer_id=buyer_id)
