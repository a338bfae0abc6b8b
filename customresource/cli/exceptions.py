from typing import IO, Any, Optional

import click


class CLIError(click.ClickException):
    """Ends the command with exit code 1, and prints the message in red to stderr."""

    def format_message(self) -> str:
        return click.style(f"Error: {self.message}", fg="red")

    def show(self, file: Optional[IO[Any]] = None) -> None:
        click.echo(self.format_message(), file=file, err=file is None)
