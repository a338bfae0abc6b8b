import sys

import pytest

from customresource.context import InvocationContext
from customresource.exceptions import ContainmentError, ProvisioningError
from customresource.invoker import failure_reason, safe_invoke
from customresource.models import ProvisioningOutcome


def test_safe_invoke_returns_outcome(lifecycle_request):
    calls = []

    def provision(request, context):
        calls.append((request, context))
        return ProvisioningOutcome(physical_resource_id="my-bucket", data={"Arn": "arn"})

    context = InvocationContext()
    result = safe_invoke(provision, lifecycle_request, context)

    assert not result.has_error
    assert result.value == ProvisioningOutcome(physical_resource_id="my-bucket", data={"Arn": "arn"})
    assert calls == [(lifecycle_request, context)]


def test_safe_invoke_keeps_raised_exception(lifecycle_request):
    error = ProvisioningError("bucket already exists")

    def provision(request, context):
        raise error

    result = safe_invoke(provision, lifecycle_request, InvocationContext())

    assert result.has_error
    assert result.error is error
    assert failure_reason(result.error) == "bucket already exists"


def test_safe_invoke_contains_runtime_errors(lifecycle_request):
    def provision(request, context):
        container = None
        container["key"] = "value"

    result = safe_invoke(provision, lifecycle_request, InvocationContext())

    assert isinstance(result.error, TypeError)
    assert failure_reason(result.error) == "'NoneType' object does not support item assignment"


@pytest.mark.parametrize("code,expected", [(3, "recovered from 3"), ("bail out", "recovered from bail out")])
def test_safe_invoke_contains_system_exit(lifecycle_request, code, expected):
    def provision(request, context):
        sys.exit(code)

    result = safe_invoke(provision, lifecycle_request, InvocationContext())

    assert isinstance(result.error, ContainmentError)
    assert failure_reason(result.error) == expected


@pytest.mark.parametrize("value", [None, "my-bucket", {"PhysicalResourceId": "my-bucket"}])
def test_safe_invoke_rejects_other_return_values(lifecycle_request, value):
    result = safe_invoke(lambda request, context: value, lifecycle_request, InvocationContext())

    assert isinstance(result.error, ContainmentError)
    assert "instead of a ProvisioningOutcome" in failure_reason(result.error)
    assert type(value).__name__ in failure_reason(result.error)


def test_safe_invoke_propagates_keyboard_interrupt(lifecycle_request):
    def provision(request, context):
        raise KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        safe_invoke(provision, lifecycle_request, InvocationContext())


def test_safe_invoke_calls_function_once(lifecycle_request):
    calls = []

    def provision(request, context):
        calls.append(request)
        raise ValueError("nope")

    safe_invoke(provision, lifecycle_request, InvocationContext())
    assert len(calls) == 1


@pytest.mark.parametrize(
    "error,expected",
    [
        (ValueError("invalid property"), "invalid property"),
        (ValueError(), "ValueError"),
        (ProvisioningError(), "ProvisioningError"),
        (KeyError("BucketName"), "'BucketName'"),
    ],
)
def test_failure_reason(error, expected):
    assert failure_reason(error) == expected
