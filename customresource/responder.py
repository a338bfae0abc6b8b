"""
Builds the status report of a lifecycle event, writes a one-line summary to the output sink, and delivers the
report to the control plane with a single HTTP PUT.
"""
import logging
from concurrent.futures import Future, wait
from typing import IO, Optional
from urllib.parse import urlsplit, urlunsplit

import requests
from werkzeug import Response

from customresource import config
from customresource.constants import APPLICATION_JSON, HEADER_CONTENT_TYPE, MAX_RESPONSE_SIZE
from customresource.context import InvocationContext
from customresource.exceptions import DeliveryError
from customresource.http.client import HttpClient
from customresource.http.request import create_request
from customresource.invoker import failure_reason
from customresource.models import (
    LifecycleRequest,
    ProvisioningOutcome,
    Status,
    StatusReport,
)
from customresource.options import HandlerConfig
from customresource.utils.functions import Result, call_safe
from customresource.utils.threads import start_worker_thread

LOG = logging.getLogger(__name__)

# how often (in seconds) an in-flight status callback checks whether the invocation context is done
CANCEL_CHECK_INTERVAL = 0.05


def redact_url(url: str) -> str:
    """Removes the query string (which carries the signature of pre-signed URLs) from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid url>"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class Responder:
    output: IO[bytes]
    transport: HttpClient
    timeout: Optional[float]

    def __init__(self, handler_config: HandlerConfig):
        self.output = handler_config.output
        self.transport = handler_config.transport
        self.timeout = handler_config.timeout

    def report(
        self, request: LifecycleRequest, result: Result, context: InvocationContext
    ) -> None:
        """Reports the result of the provisioning function as SUCCESS or FAILED."""
        if result.has_error:
            self.report_failure(request, failure_reason(result.error), context)
        else:
            self.report_success(request, result.value, context)

    def report_success(
        self, request: LifecycleRequest, outcome: ProvisioningOutcome, context: InvocationContext
    ) -> None:
        self._print(
            "%s: %s succeeded. PhysicalResourceId=%s\n"
            % (request.logical_resource_id, request.request_type, outcome.physical_resource_id)
        )
        report = StatusReport(
            status=Status.SUCCESS,
            physical_resource_id=outcome.physical_resource_id,
            stack_id=request.stack_id,
            request_id=request.request_id,
            logical_resource_id=request.logical_resource_id,
            data=outcome.data,
        )
        self.deliver(report, request.response_url, context)

    def report_failure(
        self, request: LifecycleRequest, reason: str, context: InvocationContext
    ) -> None:
        self._print(
            "%s: %s failed - %s\n" % (request.logical_resource_id, request.request_type, reason)
        )
        # the identifiers of the request are not echoed on failure
        report = StatusReport(status=Status.FAILED, reason=reason)
        self.deliver(report, request.response_url, context)

    def deliver(self, report: StatusReport, url: str, context: InvocationContext) -> None:
        """
        Sends the status report to the given URL with a single HTTP PUT. Any HTTP response counts as delivered; its
        status line and body are copied to the output. The call stops waiting for the response as soon as the
        context is cancelled or its deadline passes.

        :param report: the status report
        :param url: the response URL of the lifecycle request
        :param context: the invocation context, which bounds the time spent on the request
        :raises DeliveryError: if the report could not be serialized or sent
        """
        if context.done:
            raise DeliveryError(context.error_message(), url=url)

        try:
            body = report.to_json()
        except (TypeError, ValueError) as e:
            raise DeliveryError(f"unable to serialize status report: {e}", url=url) from e

        if len(body) > MAX_RESPONSE_SIZE:
            LOG.warning(
                "Status report is %d bytes, which exceeds the limit of %d bytes of the control plane",
                len(body),
                MAX_RESPONSE_SIZE,
            )

        try:
            http_request = create_request(
                "PUT", url, headers={HEADER_CONTENT_TYPE: APPLICATION_JSON}, body=body
            )
        except ValueError as e:
            raise DeliveryError(f"unable to create status callback request: {e}", url=url) from e

        timeout = self._get_timeout(context)
        # the deadline may have passed while the request was prepared
        if context.done:
            raise DeliveryError(context.error_message(), url=url)

        LOG.debug(
            "Sending %s status report to %s (timeout=%s)", report.status, redact_url(url), timeout
        )
        future = start_worker_thread(
            self.transport.request, http_request, timeout=timeout, name="cr-status-callback"
        )
        try:
            response = self._await_response(future, context, url)
        except DeliveryError:
            raise
        except requests.Timeout as e:
            raise DeliveryError(
                context.error_message() or f"status callback timed out: {e}", url=url
            ) from e
        except Exception as e:
            raise DeliveryError(f"unable to send status report: {e}", url=url) from e

        try:
            self._print_response(response)
        finally:
            call_safe(response.close)

    def _await_response(self, future: Future, context: InvocationContext, url: str) -> Response:
        """Waits for the response of the status callback, unless the context is done first."""
        while True:
            done, _ = wait([future], timeout=CANCEL_CHECK_INTERVAL)
            if done:
                return future.result()
            if context.done:
                LOG.debug("Abandoning status callback to %s: %s", redact_url(url), context.error_message())
                future.add_done_callback(_close_abandoned_response)
                raise DeliveryError(context.error_message(), url=url)

    def _get_timeout(self, context: InvocationContext) -> Optional[float]:
        remaining = context.remaining_time()
        if remaining is None:
            return self.timeout
        if self.timeout is None:
            return remaining
        return min(self.timeout, remaining)

    def _print_response(self, response: Response):
        LOG.debug("Status callback returned %s", response.status)
        if response.status_code >= 400:
            LOG.warning(
                "Control plane responded to status report with %s: %.200s",
                response.status,
                response.get_data(as_text=True),
            )
        self._print(response.status + "\n")
        for chunk in response.iter_encoded():
            self._write(chunk)
        call_safe(self.output.flush)

    def _print(self, line: str):
        self._write(line.encode(config.DEFAULT_ENCODING))

    def _write(self, data: bytes):
        # write errors of the output are logged and ignored
        call_safe(self.output.write, data, message="unable to write to output")


def _close_abandoned_response(future: Future):
    if not future.cancelled() and future.exception() is None:
        call_safe(future.result().close)
