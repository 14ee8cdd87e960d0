class InventoryError(Exception):
    status_code = 400
    code = "inventory_error"
    default_message = "Inventory could not be updated."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InsufficientStock(InventoryError):
    code = "insufficient_stock"
    default_message = "Insufficient stock."
