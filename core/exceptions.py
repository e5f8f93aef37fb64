from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException


class NotFound(APIException):
    status_code = 404
    default_detail = _('Requested record was not found.')
    default_code = 'not_found'


class InvalidArgument(APIException):
    status_code = 400
    default_detail = _('A required field is missing or malformed.')
    default_code = 'invalid_argument'


class InvalidState(APIException):
    """
    Raised when the current status of a record forbids the operation.
    Status code: 409 Conflict
    """
    status_code = 409
    default_detail = _('Operation is not allowed in the current status.')
    default_code = 'invalid_state'


class StoreError(APIException):
    status_code = 500
    default_detail = _('The order store could not complete the request.')
    default_code = 'store_error'


class AggregateFailure(APIException):
    """
    A multi-record operation failed part way through and was rolled back.
    `step` names the step that failed.
    """
    status_code = 500
    default_detail = _('Operation failed and was rolled back.')
    default_code = 'aggregate_failure'

    def __init__(self, step, detail=None, code=None):
        self.step = step
        if detail is None:
            detail = f"{self.default_detail} Failed step: {step}."
        super().__init__(detail=detail, code=code)


class OrderCreationFailed(AggregateFailure):
    default_detail = _('Order could not be created.')
    default_code = 'order_creation_failed'
