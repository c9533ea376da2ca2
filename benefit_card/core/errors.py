"""Domain error hierarchy for the benefit card engine.

Every failure the purchase and balance operations can signal is a subclass of
``BenefitCardError`` carrying a stable ``code`` and the HTTP status the
transport layer maps it to. Services raise these; routers never catch them.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class BenefitCardError(Exception):
    """Base exception for all benefit card errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.details = details or {}

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "details": self.details,
            }
        }


class ConsumerNotFound(BenefitCardError):
    def __init__(self, consumer_id: int):
        super().__init__(
            f"Consumer {consumer_id} not found",
            "CONSUMER_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND,
            404,
            {"consumer_id": consumer_id},
        )
        self.consumer_id = consumer_id


class CardNotFound(BenefitCardError):
    """No purse matches the card number, either for the required purse type or at all."""

    def __init__(self, card_number: int, purse: str | None = None):
        where = f"{purse} purse" if purse else "any purse"
        super().__init__(
            f"Card number not found in {where}",
            "CARD_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND,
            404,
            {"purse": purse},
        )
        self.card_number = card_number
        self.purse = purse


class UnknownCategory(BenefitCardError):
    def __init__(self, category_code: int):
        super().__init__(
            f"Unknown merchant category code {category_code}",
            "UNKNOWN_CATEGORY",
            ErrorCategory.VALIDATION,
            400,
            {"category_code": category_code},
        )
        self.category_code = category_code


class InsufficientBalance(BenefitCardError):
    def __init__(self, purse: str, balance, amount):
        super().__init__(
            f"Insufficient balance in {purse} purse",
            "INSUFFICIENT_BALANCE",
            ErrorCategory.BUSINESS_RULE,
            422,
            {"purse": purse, "balance": str(balance), "amount": str(amount)},
        )
        self.purse = purse
        self.balance = balance
        self.amount = amount


class CardMutationForbidden(BenefitCardError):
    def __init__(self, consumer_id: int, fields: list[str]):
        super().__init__(
            "Card fields cannot be changed through a profile update",
            "CARD_MUTATION_FORBIDDEN",
            ErrorCategory.FORBIDDEN,
            403,
            {"consumer_id": consumer_id, "fields": fields},
        )
        self.consumer_id = consumer_id
        self.fields = fields


class CardNumberInUse(BenefitCardError):
    def __init__(self, card_numbers: list[int]):
        super().__init__(
            "Card numbers must be unique across every purse",
            "CARD_NUMBER_IN_USE",
            ErrorCategory.CONFLICT,
            409,
            {"count": len(card_numbers)},
        )
        self.card_numbers = card_numbers


class InvalidAmount(BenefitCardError):
    def __init__(self, amount):
        super().__init__(
            "Purchase amount must be greater than zero",
            "INVALID_AMOUNT",
            ErrorCategory.VALIDATION,
            400,
            {"amount": str(amount)},
        )
        self.amount = amount
