"""Failure kinds of the order-placement workflow.

Every kind is raised before an Order is written, except ``OrderStoreError``
which is raised after the failed write has been rolled back.
"""


class OrderPlacementError(Exception):
    code = "ORDER_PLACEMENT_FAILED"
    status_code = 500


class InvalidOrderRequestError(OrderPlacementError):
    code = "INVALID_REQUEST"
    status_code = 422


class OrderStoreError(OrderPlacementError):
    code = "STORE_FAILURE"
    status_code = 500


class ProductClientError(OrderPlacementError):
    code = "PRODUCT_SERVICE_ERROR"
    status_code = 502


class ProductNotFoundError(ProductClientError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404


class ProductServiceUnavailableError(ProductClientError):
    """No address could be resolved for the product service."""

    code = "SERVICE_UNAVAILABLE"
    status_code = 503


class ProductServiceUnreachableError(ProductClientError):
    """A resolved address did not answer, timed out, or answered with an error."""

    code = "PRODUCT_SERVICE_UNREACHABLE"
    status_code = 502
