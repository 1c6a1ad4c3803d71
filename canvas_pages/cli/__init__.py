"""Command-line interface for inspecting and editing page canvases.

Key components:
    app: Typer application (entry point ``canvas-pages``)
    OutputHandler: Rich terminal output
    ExitCode: Process exit codes
"""

from .errors import CLIError, InputFileError
from .models import ExitCode
from .output import OutputHandler

__all__ = [
    "CLIError",
    "InputFileError",
    "ExitCode",
    "OutputHandler",
]
