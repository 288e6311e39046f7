from .checkout_orchestrator import CartLine, CheckoutResult, checkout

__all__ = [
    "CartLine",
    "CheckoutResult",
    "checkout",
]
