"""Domain errors raised by services and translated to HTTP responses by routers."""


class NotFoundError(LookupError):
    """A requested record does not exist"""


class PaymentGatewayError(Exception):
    """The payment gateway could not be reached or rejected the request"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
