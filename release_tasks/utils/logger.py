"""Console logger used by every pipeline step.

Wraps two rich consoles: informational lines go to stdout, errors to stderr.
Plain lines bypass markup and styling so that partial output streamed from
child processes is printed exactly as received. Output errors, such as a
closed stream or a console that cannot encode a character, are dropped.
"""

from rich.console import Console
from rich.panel import Panel


class Logger:
    """Fire-and-forget progress logger.

    Attributes:
        console: Console for informational output
        error_console: Console for error output
    """

    def __init__(
        self,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        self.console = console if console is not None else Console()
        if error_console is None:
            error_console = Console(stderr=True) if console is None else console
        self.error_console = error_console

    def info(self, text: object, plain: bool = False) -> None:
        """Log an informational line.

        Args:
            text: Line to log
            plain: Skip colorization (used for streamed command output)
        """
        self._write(self.console, str(text), "green", plain)

    def error(self, text: object, plain: bool = False) -> None:
        """Log an error line.

        Args:
            text: Line to log
            plain: Skip colorization
        """
        self._write(self.error_console, str(text), "red", plain)

    def banner(self, text: str, title: str, style: str = "cyan") -> None:
        """Print a framed banner for pipeline start and finish."""
        try:
            self.console.print(
                Panel(
                    _encodable(self.console, text),
                    title=_encodable(self.console, title),
                    border_style=style,
                )
            )
        except (OSError, UnicodeError):
            pass

    @staticmethod
    def _write(console: Console, text: str, style: str, plain: bool) -> None:
        # A closed stdout must not fail the pipeline
        text = _encodable(console, text)
        try:
            if plain:
                console.out(text, highlight=False)
            else:
                console.print(text, style=style, markup=False, highlight=False)
        except (OSError, UnicodeError):
            pass


def _encodable(console: Console, text: str) -> str:
    # rich keeps text that failed to encode in its buffer, so replace it up front
    try:
        return text.encode(console.encoding, errors="replace").decode(console.encoding)
    except LookupError:
        return text
