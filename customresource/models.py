"""
Typed shapes of the lifecycle event sent by the control plane, of the outcome produced by a provisioning
function, and of the status report sent back to the control plane.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from customresource.constants import (
    REQUEST_TYPE_CREATE,
    REQUEST_TYPE_DELETE,
    REQUEST_TYPE_UPDATE,
    STATUS_FAILED,
    STATUS_SUCCESS,
)
from customresource.exceptions import DecodeError
from customresource.utils.json import json_dumps

LOG = logging.getLogger(__name__)


class RequestType(str, Enum):
    CREATE = REQUEST_TYPE_CREATE
    UPDATE = REQUEST_TYPE_UPDATE
    DELETE = REQUEST_TYPE_DELETE

    def __str__(self):
        return self.value


class Status(str, Enum):
    SUCCESS = STATUS_SUCCESS
    FAILED = STATUS_FAILED

    def __str__(self):
        return self.value


# maps the keys of the lifecycle event document to the attributes of LifecycleRequest
REQUEST_STRING_FIELDS = {
    "RequestType": "request_type",
    "ResponseURL": "response_url",
    "StackId": "stack_id",
    "RequestId": "request_id",
    "ResourceType": "resource_type",
    "LogicalResourceId": "logical_resource_id",
    "PhysicalResourceId": "physical_resource_id",
}
REQUEST_PROPERTY_FIELDS = {
    "ResourceProperties": "resource_properties",
    "OldResourceProperties": "old_resource_properties",
}


@dataclass(frozen=True)
class LifecycleRequest:
    """
    A Create, Update or Delete event for a custom resource, as sent by the control plane.

    ``physical_resource_id`` is empty on Create. ``old_resource_properties`` is only set on Update. A request
    type the control plane may add in the future is kept as plain string.
    """

    request_type: Union[RequestType, str] = ""
    response_url: str = ""
    stack_id: str = ""
    request_id: str = ""
    resource_type: str = ""
    logical_resource_id: str = ""
    physical_resource_id: str = ""
    resource_properties: Optional[Any] = None
    old_resource_properties: Optional[Any] = None

    @property
    def is_create(self) -> bool:
        return self.request_type == RequestType.CREATE

    @property
    def is_update(self) -> bool:
        return self.request_type == RequestType.UPDATE

    @property
    def is_delete(self) -> bool:
        return self.request_type == RequestType.DELETE

    def to_dict(self) -> Dict[str, Any]:
        doc = {key: str(getattr(self, attr)) for key, attr in REQUEST_STRING_FIELDS.items()}
        for key, attr in REQUEST_PROPERTY_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                doc[key] = value
        return doc


@dataclass
class ProvisioningOutcome:
    """
    The result of a successful provisioning function.

    :param physical_resource_id: identifies the resource that now exists. Required on Create, and should stay
        stable across Update and Delete of the same logical resource.
    :param data: output attributes, readable from the template with ``Fn::GetAtt``
    :param no_echo: kept for provisioning functions that set it, it is not part of the status report
    """

    physical_resource_id: str = ""
    data: Optional[Dict[str, Any]] = None
    no_echo: bool = False


@dataclass
class StatusReport:
    status: Status
    reason: str = ""
    physical_resource_id: str = ""
    stack_id: str = ""
    request_id: str = ""
    logical_resource_id: str = ""
    data: Optional[Any] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        # every field is always present on the wire, like the control plane expects it
        return {
            "Status": str(self.status),
            "Reason": self.reason,
            "PhysicalResourceId": self.physical_resource_id,
            "StackId": self.stack_id,
            "RequestId": self.request_id,
            "LogicalResourceId": self.logical_resource_id,
            "Data": self.data,
        }

    def to_json(self) -> bytes:
        return json_dumps(self.to_dict())


def _parse_request_type(value: str) -> Union[RequestType, str]:
    try:
        return RequestType(value)
    except ValueError:
        if value:
            LOG.debug("Unknown request type %s", value)
        return value


def decode_request(payload: Union[bytes, bytearray, str, Mapping[str, Any]]) -> LifecycleRequest:
    """
    Decodes the payload of an invocation into a ``LifecycleRequest``. Only the structure of the document is
    checked: keys are case-sensitive, unknown keys are ignored, and missing string fields become empty strings.

    :param payload: the raw JSON document, or the already parsed document as handed over by the Lambda runtime
    :return: the lifecycle request
    :raises DecodeError: if the payload is not a JSON object of the expected shape
    """
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            document = json.loads(payload)
        except ValueError as e:
            raise DecodeError(f"unable to decode lifecycle event: {e}") from e
    else:
        document = payload

    if not isinstance(document, Mapping):
        raise DecodeError(
            f"unable to decode lifecycle event: expected a JSON object, got {type(document).__name__}"
        )

    kwargs = {}
    for key, attr in REQUEST_STRING_FIELDS.items():
        value = document.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise DecodeError(
                f"unable to decode lifecycle event: {key} must be a string, got {type(value).__name__}"
            )
        kwargs[attr] = value

    for key, attr in REQUEST_PROPERTY_FIELDS.items():
        if key in document:
            kwargs[attr] = document[key]

    if "request_type" in kwargs:
        kwargs["request_type"] = _parse_request_type(kwargs["request_type"])

    return LifecycleRequest(**kwargs)


def encode_request(request: LifecycleRequest) -> bytes:
    """
    Encodes a ``LifecycleRequest`` into the JSON document the control plane sends. ``ResourceProperties`` and
    ``OldResourceProperties`` are omitted when they are not set.
    """
    return json_dumps(request.to_dict())
