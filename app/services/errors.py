class ServiceError(Exception):
    """Expected failure a route turns into a JSON error response."""
    status = 400

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class NotFound(ServiceError):
    status = 404


class InvalidVoucher(ServiceError):
    pass


class InvalidCart(ServiceError):
    pass
