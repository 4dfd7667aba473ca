"""Integration tests for the Celery configuration."""

import pytest

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "greeniecart"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "greeniecart"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE == "Asia/Manila"

    def test_rebuild_task_registered(self):
        from config.celery import app
        from modules.fulfillment.tasks import rebuild_seller_summaries

        assert rebuild_seller_summaries.name == "fulfillment.rebuild_seller_summaries"
        assert rebuild_seller_summaries.name in app.tasks


class TestRebuildTask:
    def test_rebuild_all_without_sales(self):
        from modules.fulfillment.tasks import rebuild_seller_summaries

        result = rebuild_seller_summaries.delay()

        assert result.successful()
        assert result.result == {"status": "ok", "sellers": 0}
