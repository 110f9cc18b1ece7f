class PaymentError(Exception):
    """Base class for payment system exceptions."""

    pass


class FinalizationConflict(PaymentError):
    """
    Raised inside the finalisation transaction when the project can no longer
    be transferred to the order's buyer, so that the whole transaction rolls
    back.
    """

    def __init__(self, order_id, message: str):
        super().__init__(message)
        self.order_id = order_id
        self.message = message
