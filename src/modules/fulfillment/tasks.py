"""Celery tasks for the fulfillment module."""

from typing import Optional

import structlog
from celery import shared_task

from modules.fulfillment.repositories.django_repository import FulfillmentDjangoRepository
from modules.fulfillment.services import FulfillmentService

logger = structlog.get_logger(__name__)


@shared_task(name="fulfillment.rebuild_seller_summaries")
def rebuild_seller_summaries(seller_id: Optional[str] = None) -> dict:
    """Recompute rollups for one seller, or for every seller with sales."""
    service = FulfillmentService(FulfillmentDjangoRepository())
    if seller_id:
        service.rebuild_summary(seller_id)
        rebuilt = 1
    else:
        rebuilt = service.rebuild_all()
    logger.info("fulfillment.rebuild_task_completed", sellers=rebuilt)
    return {"status": "ok", "sellers": rebuilt}
