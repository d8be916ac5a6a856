# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import click
from click import HelpFormatter
from click_help_colors import HelpColorsCommand

from .common import USAGE

# key of `ctx.meta` holding the options in command-line order
OPTION_ORDER = "qalter.option_order"


class QalterHelpFormatter(HelpFormatter):
    """
    Help formatter listing every option on its own line, followed by its
    indented description.
    """

    def __init__(
        self,
        width: int | None = None,
        headers_color: str = "white",
        options_color: str = "white",
    ):
        super().__init__(width=width)
        self._headers_color = headers_color
        self._options_color = options_color

    def write_heading(self, heading: str) -> None:
        self.write(click.style(heading, fg=self._headers_color, bold=True) + "\n")

    def write_dl(self, rows, col_max: int = 30, col_spacing: int = 2) -> None:
        indent = " " * (self.current_indent + 2)
        for term, definition in rows:
            self.write(f"{indent}{click.style(term, fg=self._options_color, bold=True)}\n")
            for line in filter(str.strip, (definition or "").splitlines()):
                self.write(f"{indent}    {line}\n")
            self.write("\n")


class QalterCommand(HelpColorsCommand):
    """
    Click command printing the traditional qalter synopsis as its usage
    and the options in GNU style.

    The names of the options in the order in which they occur on the command line
    (one entry per occurrence) are stored in `ctx.meta[OPTION_ORDER]`.
    """

    def parse_args(self, ctx, args):
        # the parser consumes the list it is given
        _, _, order = self.make_parser(ctx).parse_args(args=list(args))
        ctx.meta[OPTION_ORDER] = [
            param.name for param in order if isinstance(param, click.Option)
        ]
        return super().parse_args(ctx, args)

    def format_usage(self, ctx, formatter):
        formatter.write(f"{USAGE.expandtabs(8)}\n")

    def get_help(self, ctx):
        formatter = QalterHelpFormatter(
            width=ctx.terminal_width,
            headers_color=self.help_headers_color or "white",
            options_color=self.help_options_color or "white",
        )
        self.format_help(ctx, formatter)
        return formatter.getvalue()
