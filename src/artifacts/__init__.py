"""Report renderings: console text, JSON and Graphviz DOT."""

from artifacts.console import render_console
from artifacts.dot import render_dot
from artifacts.write import (
    DEFAULT_DOT_FILENAME,
    REPORT_FORMATS,
    render_json,
    render_report,
    write_dot,
    write_report_json,
)

__all__ = [
    "DEFAULT_DOT_FILENAME",
    "REPORT_FORMATS",
    "render_console",
    "render_dot",
    "render_json",
    "render_report",
    "write_dot",
    "write_report_json",
]
