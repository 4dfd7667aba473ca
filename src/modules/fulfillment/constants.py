from modules.orders.constants import OrderStatus

# Summary counter that holds lines in each order status.
STATUS_BUCKETS: dict[str, str] = {
    OrderStatus.PENDING: "pending_to_ship",
    OrderStatus.PAID: "pending_to_ship",
    OrderStatus.SHIPPED: "shipped",
    OrderStatus.COMPLETED: "completed",
}
