"""Checkout workflow steps and the moves allowed between them.

A buyer with no open session is idle.  ``failed`` can be retried
(``submitting``) or edited (``payment``); ``completed`` is terminal.
"""

from django.db import models


class CheckoutStep(models.TextChoices):
    DELIVERY = "delivery", "Delivery details"
    PAYMENT = "payment", "Payment method"
    REVIEW = "review", "Review"
    SUBMITTING = "submitting", "Submitting"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


STEP_TRANSITIONS: dict[str, set[str]] = {
    CheckoutStep.DELIVERY: {CheckoutStep.PAYMENT},
    CheckoutStep.PAYMENT: {CheckoutStep.REVIEW, CheckoutStep.DELIVERY},
    CheckoutStep.REVIEW: {CheckoutStep.SUBMITTING, CheckoutStep.PAYMENT},
    CheckoutStep.SUBMITTING: {CheckoutStep.COMPLETED, CheckoutStep.FAILED},
    CheckoutStep.FAILED: {CheckoutStep.SUBMITTING, CheckoutStep.PAYMENT},
    CheckoutStep.COMPLETED: set(),
}

BACK_STEPS: dict[str, str] = {
    CheckoutStep.PAYMENT: CheckoutStep.DELIVERY,
    CheckoutStep.REVIEW: CheckoutStep.PAYMENT,
    CheckoutStep.FAILED: CheckoutStep.PAYMENT,
}

NON_CANCELLABLE_STEPS: set[str] = {CheckoutStep.SUBMITTING, CheckoutStep.COMPLETED}

CHECKOUT_FAILED_MESSAGE = "Checkout failed. Please try again."
