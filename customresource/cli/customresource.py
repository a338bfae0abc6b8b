import importlib
import json
import logging
import os
import sys
import traceback
from typing import Optional

import click

from customresource import config
from customresource.constants import VERSION
from customresource.context import InvocationContext
from customresource.exceptions import CustomResourceError
from customresource.handler import Handler, new
from customresource.invoker import ProvisioningFunction
from customresource.models import LifecycleRequest, RequestType, encode_request
from customresource.options import with_output, with_timeout

from .exceptions import CLIError


class CustomResourceCliGroup(click.Group):
    """Turns unexpected exceptions of commands into a ``CLIError``. With ``--debug``, the traceback is printed first."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.exceptions.Exit, click.exceptions.Abort):
            raise
        except Exception as e:
            if ctx.params.get("debug"):
                click.echo(traceback.format_exc(), err=True)
            if isinstance(e, click.ClickException):
                raise
            raise CLIError(str(e)) from e


@click.group(
    name="customresource",
    cls=CustomResourceCliGroup,
    context_settings=dict(help_option_names=["-h", "--help"], show_default=True),
)
@click.version_option(
    VERSION,
    "-v",
    "--version",
    prog_name="customresource",
    message="%(prog)s %(version)s",
    help="Print the version and exit",
)
@click.option("-d", "--debug", is_flag=True, help="Log debug output and print tracebacks of errors")
def customresource(debug: bool) -> None:
    """Replay custom resource lifecycle events against provisioning functions."""
    from customresource.logging import setup

    if debug:
        config.DEBUG = True
        os.environ["DEBUG"] = "1"
        setup.setup_logging(logging.DEBUG)
    else:
        setup.setup_logging_from_config()


def _parse_json_option(value: Optional[str], option: str):
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"not a valid JSON document: {e}", param_hint=option)


@customresource.command(name="event", short_help="Print a lifecycle event")
@click.option(
    "-t",
    "--type",
    "request_type",
    type=click.Choice([t.value for t in RequestType]),
    default=RequestType.CREATE.value,
    help="The request type of the event",
)
@click.option("--logical-id", required=True, help="The logical id of the resource")
@click.option("--response-url", required=True, help="The URL the status report is sent to")
@click.option("--stack-id", default="", help="The id of the stack")
@click.option("--request-id", default="", help="The id of the request")
@click.option("--resource-type", default="Custom::Resource", help="The type of the resource")
@click.option("--physical-id", default="", help="The physical id (Update and Delete only)")
@click.option("--properties", default=None, help="The resource properties as JSON document")
@click.option(
    "--old-properties", default=None, help="The previous resource properties as JSON document"
)
def cmd_event(
    request_type: str,
    logical_id: str,
    response_url: str,
    stack_id: str,
    request_id: str,
    resource_type: str,
    physical_id: str,
    properties: Optional[str],
    old_properties: Optional[str],
) -> None:
    """
    Print a lifecycle event document, which can be used as input for ``customresource invoke``.
    """
    request = LifecycleRequest(
        request_type=RequestType(request_type),
        response_url=response_url,
        stack_id=stack_id,
        request_id=request_id,
        resource_type=resource_type,
        logical_resource_id=logical_id,
        physical_resource_id=physical_id,
        resource_properties=_parse_json_option(properties, "--properties"),
        old_resource_properties=_parse_json_option(old_properties, "--old-properties"),
    )
    click.echo(encode_request(request))


def load_provisioning_function(spec: str) -> ProvisioningFunction:
    """
    Loads a provisioning function from a ``module:attribute`` specification. The attribute can also be a
    ``Handler``, in which case its provisioning function is used.
    """
    module_name, _, attribute = spec.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter(f"expected module:function, got {spec!r}", param_hint="--handler")

    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(
            f"unable to import module {module_name}: {e}", param_hint="--handler"
        )

    fn = module
    for name in attribute.split("."):
        fn = getattr(fn, name, None)
        if fn is None:
            raise click.BadParameter(
                f"module {module_name} has no attribute {attribute}", param_hint="--handler"
            )

    if isinstance(fn, Handler):
        return fn.fn
    if not callable(fn):
        raise click.BadParameter(f"{spec} is not callable", param_hint="--handler")
    return fn


@customresource.command(name="invoke", short_help="Invoke a provisioning function")
@click.argument("event_file", type=click.File("rb"))
@click.option(
    "--handler",
    "handler_spec",
    required=True,
    help="The provisioning function, as module:function",
)
@click.option("--response-url", default=None, help="Override the ResponseURL of the event")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Timeout of the invocation in seconds (no timeout if not set)",
)
@click.option("-q", "--quiet", is_flag=True, help="Do not print the progress output")
def cmd_invoke(
    event_file, handler_spec: str, response_url: Optional[str], timeout: Optional[float], quiet: bool
) -> None:
    """
    Invoke a provisioning function with the lifecycle event in EVENT_FILE (use - for stdin), and send the status
    report to the ResponseURL of the event.
    """
    fn = load_provisioning_function(handler_spec)

    payload = event_file.read()
    if response_url:
        try:
            document = json.loads(payload)
        except ValueError:
            document = None
        if isinstance(document, dict):
            document["ResponseURL"] = response_url
            payload = json.dumps(document)

    options = [with_timeout(timeout)]
    if not quiet:
        options.append(with_output(click.get_binary_stream("stdout")))

    handler = new(fn, *options)
    context = InvocationContext.with_timeout(timeout) if timeout else InvocationContext()

    try:
        handler.invoke(payload, context)
    except CustomResourceError as e:
        raise CLIError(str(e)) from e
