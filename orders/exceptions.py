from products.exceptions import InsufficientStock  # noqa: F401


class OrderError(Exception):
    status_code = 400
    code = "order_error"
    default_message = "Order could not be processed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyOrder(OrderError):
    code = "empty_order"
    default_message = "An order needs at least one item."


class ProductUnavailable(OrderError):
    code = "product_unavailable"
    default_message = "Product is not available."


class InvalidVariant(OrderError):
    code = "invalid_variant"
    default_message = "Select a valid size for this product."


class InvalidTransition(OrderError):
    code = "invalid_transition"
    default_message = "Invalid status transition."


class InvalidPaymentTransition(OrderError):
    code = "invalid_payment_transition"
    default_message = "Invalid payment status transition."


class OrderNotCancellable(OrderError):
    code = "order_not_cancellable"
    default_message = "This order can no longer be cancelled."
