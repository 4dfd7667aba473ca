"""Fulfillment URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.fulfillment.views import ReceivedOrdersView, SellerSummaryView

urlpatterns = [
    path("fulfillment/orders/", ReceivedOrdersView.as_view(), name="fulfillment-orders"),
    path("fulfillment/summary/", SellerSummaryView.as_view(), name="fulfillment-summary"),
]
