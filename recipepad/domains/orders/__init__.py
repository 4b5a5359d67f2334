from recipepad.domains.orders.schemas import OrderCreate, OrderResponse

__all__ = ["OrderCreate", "OrderResponse"]
