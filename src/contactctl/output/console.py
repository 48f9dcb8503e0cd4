"""Rich console plumbing shared by the renderers.

Renderers draw onto an in-memory console and hand back plain text, so
the CLI decides where output goes. Rich strips styling by itself when
the final destination is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

CONTACT_THEME = Theme(
    {
        # status line
        "contact.ok": "bold green",
        "contact.error": "bold red",
        "contact.warning": "bold yellow",
        "contact.op": "bold cyan",
        # contact fields
        "contact.key": "dim",
        "contact.id": "bold blue",
        "contact.name": "bold",
        "contact.phone": "magenta",
        "contact.email": "cyan",
        "contact.reason": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Return a themed console that writes into a fresh buffer."""
    return Console(
        file=StringIO(),
        width=width or DEFAULT_WIDTH,
        theme=CONTACT_THEME,
        highlight=False,
        no_color=no_color,
    )


def get_output(console: Console) -> str:
    """Everything printed to *console* so far."""
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()
