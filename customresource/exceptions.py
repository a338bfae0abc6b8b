class CustomResourceError(Exception):
    """Base class for all errors raised by customresource."""

    message: str

    def __init__(self, message: str = None):
        self.message = message or ""
        super(CustomResourceError, self).__init__(self.message)


class DecodeError(CustomResourceError, ValueError):
    """
    Raised when the invocation payload is not a JSON document of the shape of a lifecycle event. No status
    report is sent in this case, since there is no callback URL to send it to.
    """


class ProvisioningError(CustomResourceError):
    """
    Raise from a provisioning function to fail the lifecycle event. The message becomes the ``Reason`` of the
    FAILED status report.
    """


class ContainmentError(CustomResourceError):
    """Raised in place of an abnormal termination of the provisioning function that carries no exception."""


class DeliveryError(CustomResourceError):
    """
    Raised when the status report could not be sent to the control plane. The original cause is chained as
    ``__cause__``.
    """

    url: str

    def __init__(self, message: str = None, url: str = None):
        super(DeliveryError, self).__init__(message)
        self.url = url or ""
