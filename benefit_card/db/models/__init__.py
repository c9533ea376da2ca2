from .consumer import Consumer
from .card_number import CardNumber
from .extract import Extract

__all__ = [
    "Consumer",
    "CardNumber",
    "Extract",
]
