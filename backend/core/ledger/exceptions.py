from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.exceptions import APIException


class ImmutableLedgerError(ValidationError):
    """Raised on any attempt to modify or remove a credit transaction.

    Not a user-facing condition: no public operation updates or deletes entries.
    """


class InsufficientBalance(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient balance."
    default_code = "insufficient_balance"

    def __init__(self, current_balance: int, requested_amount: int):
        self.current_balance = current_balance
        self.requested_amount = requested_amount
        super().__init__(
            f"Insufficient balance. Current balance: {current_balance}, Requested: {requested_amount}"
        )
