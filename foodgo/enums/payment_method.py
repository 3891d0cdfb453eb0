from enum import Enum

class PaymentMethod(str, Enum):
    CARD = "card"   # Card details are captured by the payment collaborator
    CASH = "cash"   # Pay when the order arrives
