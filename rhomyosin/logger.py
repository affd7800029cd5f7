"""
logger.py
A unified, rich-text logger for Rho-Myosin simulation runs.
Log records go to stderr through rich; run reports go to stdout.
"""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Define custom-theme for consistent coloring
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green"
})

console = Console(theme=custom_theme)
err_console = Console(theme=custom_theme, stderr=True)


class RichLogger:
    """
    A Singleton wrapper around Python's logging module that provides rich-text
    console output and optional plain-text file logging.

    Diagnostic records (including errors that end a run) are rendered on
    stderr, while `success` prints on the stdout console that
    also carries the run summary.
    """
    _instance = None

    def __new__(cls, name="RhoMyosin", log_file=None, level=logging.INFO):
        if cls._instance is None:
            cls._instance = super(RichLogger, cls).__new__(cls)
            cls._instance._setup(name, log_file, level)
        return cls._instance

    def _setup(self, name, log_file, level):
        """
        Initializes the logger configuration, handlers, and formatters.

        Args:
            name (str): Name of the logger instance.
            log_file (str): Path to the output log file, or None for console only.
            level (int): Logging threshold (e.g., logging.INFO).
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers = []  # Clear existing handlers
        self.logger.propagate = False

        rich_handler = RichHandler(
            console=err_console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=True
        )
        rich_handler.setLevel(level)
        self.logger.addHandler(rich_handler)

        if log_file:
            self.add_file_handler(log_file, level)

    def add_file_handler(self, log_file, level=logging.INFO):
        """
        Safely adds a file handler to an existing logger.
        Avoids duplicate file handlers if called multiple times.
        """
        self.logger.handlers = [h for h in self.logger.handlers if not isinstance(h, logging.FileHandler)]

        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(path, mode="w")
        file_handler.setLevel(level)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def close_file_handlers(self):
        """Flush and detach every file handler."""
        for h in [h for h in self.logger.handlers if isinstance(h, logging.FileHandler)]:
            h.close()
            self.logger.removeHandler(h)

    def set_level(self, level):
        self.logger.setLevel(level)
        for h in self.logger.handlers:
            h.setLevel(level)

    def debug(self, msg, *args, **kwargs):
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self.logger.info(msg, *args, **kwargs)

    def success(self, msg, *args, **kwargs):
        """
        Log a success message with a checkmark icon.

        Args:
            msg (str): The message string.
            *args, **kwargs: Arguments passed to the standard logger.
        """
        console.print(f"[success]✔ {msg}[/success]")
        self.logger.info(f"[SUCCESS] {msg}", *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self.logger.error(msg, *args, **kwargs)

    def get_console(self):
        """
        Retrieve the stdout `rich.console.Console` instance used for reports.

        Returns:
            rich.console.Console: The active console object.
        """
        return console


# Global singleton accessor
def get_logger(log_file=None):
    """
    Get the logger instance.

    Args:
        log_file (str): Optional log file. Attached to the singleton on every
            call that passes one.
    """
    instance = RichLogger()
    if log_file:
        instance.add_file_handler(log_file)
    return instance
