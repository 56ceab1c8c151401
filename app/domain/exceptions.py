# app/domain/exceptions.py
"""
Wyjatki domenowe serwisu produktow.

Routery mapuja je na kody HTTP, serwis nie wie nic o HTTP.
"""


class InventoryError(Exception):
    """Bazowy wyjatek dla wszystkich bledow domeny."""


class ProductNotFoundError(InventoryError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found.")


class InsufficientStockError(InventoryError):
    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__("Not enough stock available to decrement.")


class StockLimitExceededError(InventoryError):
    def __init__(self, product_id: int, limit: int):
        self.product_id = product_id
        super().__init__(f"Stock for product with ID {product_id} cannot exceed {limit}.")


class StockBusyError(InventoryError):
    """Nie udalo sie zdobyc locka na stan produktu."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Stock of product with ID {product_id} is being modified, try again.")
