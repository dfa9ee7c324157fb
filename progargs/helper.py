"""
Progargs help rendering.

Layout (registration order, one entry per definition)

    Usage: PROG [OPTIONS]...

    Options:
      -v, --verbose
          Enable verbose output
      -i, --input <string>
          Input file path (required)

Styling
- Palette keys: usage-label, program-name, usage-section, options-label,
  option-name, flag-name, metavar, argument-description, required-marker.
- Define a mapping named __styles__ in __main__ to override any palette entry.
- colorful=False on the parser strips every style; fancy=True wraps the text in a Panel.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce
from .values import ValueType


def render_help(parser, program_name=Unset, /):
    """
    Build the help text for `parser` as rich Text.

    The program name is taken from `program_name`, then the parser's prog, then "program".
    """
    styles = defaultdict(str, {
        # === Usage line ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan

        # === Options ===
        "options-label": "bold #FFFFFF",  # Pure white header
        "option-name": "bold #00E6FF",  # CYAN for valued options
        "flag-name": "bold #22C55E",  # GREEN for flags
        "metavar": "bold #FFD600",  # AMBER for placeholders
        "argument-description": "#9CA3AF",  # Muted gray
        "required-marker": "bold #EF4444",  # RED marker
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    def text(fragment, style=""):
        if not parser.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    program = coalesce(program_name, parser.prog) or "program"

    help = Text()
    help.append(text("Usage", styler("usage-label"))).append(": ")
    help.append(text(program, styler("program-name"))).append(" ")
    help.append(text("[OPTIONS]...", styler("usage-section"))).append("\n\n")
    help.append(text("Options", styler("options-label"))).append(":")

    for definition in parser.definitions:
        style = "flag-name" if definition.type is ValueType.FLAG else "option-name"
        help.append("\n  ")
        help.append(Text(", ").join(text(name, styler(style)) for name in definition.names))
        if placeholder := definition.type.placeholder:
            help.append(" ").append(text(placeholder, styler("metavar")))

        if definition.description:
            help.append("\n      ")
            help.append(text(definition.description, styler("argument-description")))
            if definition.required:
                help.append(" ").append(text("(required)", styler("required-marker")))

    return help


def print_help(parser, program_name=Unset, /):
    """
    Print the help text on stdout (inside a Panel when the parser is fancy).
    """
    console = Console(highlight=False)
    renderable = render_help(parser, program_name)

    if parser.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", "%s HELP" % (coalesce(program_name, parser.prog) or "program").upper(), " ", "]"),
            title_align="left",
        )

    console.print(renderable)


__all__ = (
    "render_help",
    "print_help",
)
