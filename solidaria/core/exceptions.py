# =========================================================
# LEDGER ERRORS
#
# Raised by the service layer, mapped to HTTP responses by a
# single handler registered in solidaria.main.
#
# ValidationError   -> 400
# NotFound          -> 404
# Forbidden         -> 403
# Conflict          -> 409
# PersistenceError  -> 500
# =========================================================


class LedgerError(Exception):
    status_code = 500
    kind = "LedgerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    status_code = 400
    kind = "ValidationError"


class NotFound(LedgerError):
    status_code = 404
    kind = "NotFound"


class Forbidden(LedgerError):
    status_code = 403
    kind = "Forbidden"


class Conflict(LedgerError):
    status_code = 409
    kind = "Conflict"


class PersistenceError(LedgerError):
    status_code = 500
    kind = "PersistenceError"


# ---------------- ORDERS ----------------

class EmptyOrder(ValidationError):
    def __init__(self):
        super().__init__("Sale must contain items")


class DishNotFound(ValidationError):
    def __init__(self, dish_id: int):
        super().__init__(f"Dish {dish_id} not found")
        self.dish_id = dish_id


class DishKermesseMismatch(ValidationError):
    def __init__(self, dish_id: int, kermesse_id: int):
        super().__init__(f"Dish {dish_id} does not belong to kermesse {kermesse_id}")
        self.dish_id = dish_id
        self.kermesse_id = kermesse_id


class InsufficientStock(ValidationError):
    def __init__(self, dish_id: int, dish_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {dish_name} (dish {dish_id}): "
            f"{available} available, {requested} requested"
        )
        self.dish_id = dish_id


class SaleNotFound(NotFound):
    def __init__(self, sale_id: int):
        super().__init__(f"Sale {sale_id} not found")


class InvalidStatusTransition(ValidationError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move status from {current} to {requested}")


# ---------------- EVENTS / DONATIONS ----------------

class KermesseNotFound(NotFound):
    def __init__(self, kermesse_id: int):
        super().__init__(f"Kermesse {kermesse_id} not found")


class IngredientNotFound(NotFound):
    def __init__(self, ingredient_id: int):
        super().__init__(f"Ingredient {ingredient_id} not found")


# ---------------- COLLABORATION ----------------

class RequestNotFound(NotFound):
    def __init__(self, collaborator_id: int):
        super().__init__(f"Collaboration request {collaborator_id} not found")


class DuplicateRequest(Conflict):
    def __init__(self):
        super().__init__("Already a collaborator or pending request")


class RequestAlreadyResolved(Conflict):
    def __init__(self, collaborator_id: int, status: str):
        super().__init__(
            f"Collaboration request {collaborator_id} was already resolved ({status})"
        )
