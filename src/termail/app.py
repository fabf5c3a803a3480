# =============================================================================
# termail Main Application
# =============================================================================
# This is the main Textual application class that wires the UI to the focus
# state machine.
#
# Input flows one way:
#   key press -> key queue
#   timer tick -> keymap.translate() -> TickLoop.submit() + TickLoop.tick()
#              -> FocusStateMachine.handle()
#   state changed -> refresh_view() -> MainScreen.show_state() + overlays
#
# The app manages:
#   - Configuration loading
#   - Logging setup
#   - The tick timer and overlay screens
# =============================================================================

import argparse
import logging
import sys
from collections import deque
from pathlib import Path

from textual import events
from textual.app import App

from termail import __app_name__, __version__
from termail.config import Config, ConfigError, ConfigResolutionError, print_paths
from termail.core import Panel
from termail.focus import FocusStateMachine, TickLoop
from termail.rendering import ContentExtractor, ExtractOptions
from termail.ui.keymap import translate
from termail.ui.screens import ErrorScreen, HelpScreen, MainScreen

logger = logging.getLogger(__name__)


class TermailApp(App):
    """
    The main termail application.

    This Textual App subclass owns the focus state machine and its tick
    loop. Screens only draw; every key press becomes a command for the
    machine.

    Attributes:
        config: The loaded application configuration.
        machine: The focus state machine holding all client state.
        loop: Tick loop feeding commands to the machine.
    """

    # Application metadata
    TITLE = "termail"

    def __init__(
        self,
        config: Config | None = None,
        machine: FocusStateMachine | None = None,
        config_error: str | None = None,
    ) -> None:
        """
        Initialize the termail application.

        Args:
            config: Optional pre-loaded configuration. If not provided,
                    configuration will be loaded from the default location.
            machine: Optional pre-built state machine. If not provided, the
                     configured mail directory is scanned.
            config_error: Config problem found by the caller, shown once
                          the app is mounted.
        """
        super().__init__()

        # Initialize config error tracking
        self._config_error = config_error

        # Load configuration if not provided
        if config is None:
            try:
                config = Config.load()
            except ConfigResolutionError:
                raise
            except ConfigError as e:
                config = Config()
                self._config_error = str(e)
        self.config = config

        if machine is None:
            extractor = ContentExtractor(
                ExtractOptions(prefer_plain=config.ui.prefer_plain_text)
            )
            machine = FocusStateMachine.create(
                config.effective_mail_dir(), config.scan_depth, extractor
            )
        self.machine = machine
        self.loop = TickLoop(machine)

        self._main_screen: MainScreen | None = None
        self._overlay: Panel | None = None
        self._keys: deque[str] = deque()

    async def on_mount(self) -> None:
        """Called when the application is mounted and ready."""
        # Check for config errors
        if self._config_error:
            self.notify(
                f"Config error: {self._config_error}",
                severity="error",
                timeout=10,
            )

        self._main_screen = MainScreen(date_format=self.config.ui.date_format)
        await self.push_screen(self._main_screen)
        self.set_interval(self.config.ui.tick_interval, self._tick)
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        """Queue a key press for the next tick."""
        self._keys.append(event.key)

    def _tick(self) -> None:
        # Keys are translated when applied, against the panel focused by then
        if self._keys:
            command = translate(self._keys.popleft(), self.machine.focus.panel)
            if command is not None:
                self.loop.submit(command)
        if self.loop.tick():
            self.refresh_view()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def refresh_view(self) -> None:
        """Draw the machine's state: panels, overlays, or exit on quit."""
        if not self.loop.running:
            self.exit()
            return

        panel = self.machine.focus.panel
        overlay = panel if panel.is_overlay else None
        if overlay is not self._overlay:
            if self._overlay is not None:
                self.pop_screen()
            if overlay is Panel.HELP_OVERLAY:
                self.push_screen(HelpScreen())
            elif overlay is Panel.ERROR_OVERLAY:
                self.push_screen(ErrorScreen(self.machine.state.error_message))
            self._overlay = overlay

        if self._main_screen is not None:
            self._main_screen.show_state(self.machine)


# =============================================================================
# CLI Entry Point
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="termail: A terminal reader for local maildir mail",
    )

    parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        help="Mail directory to open (default: mail_dir from the config file)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    args = parser.parse_args(argv)
    if args.directory is not None and not args.directory.expanduser().is_dir():
        parser.print_usage(sys.stderr)
        parser.exit(1, f"{__app_name__}: no such directory: {args.directory}\n")
    return args


def setup_logging(debug: bool = False) -> None:
    """
    Send log records to the log file in the state directory.

    The terminal belongs to Textual, so nothing is logged to stderr.
    """
    log_file = Config.log_file_path()
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Cannot create log directory {log_file.parent}: {e}", file=sys.stderr)
        return

    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for termail.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version)
        3. Loads configuration
        4. Starts the Textual application

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    # Handle --paths flag
    if args.paths:
        print_paths()
        return 0

    setup_logging(args.debug)

    # Load configuration
    config_error = None
    try:
        config = Config.load()
    except ConfigResolutionError as e:
        print(f"{__app_name__}: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        logger.warning("Using default configuration: %s", e)
        config = Config()
        config_error = str(e)

    if args.directory is not None:
        config.mail_dir_from_cli = str(args.directory.expanduser().absolute())

    # Create and run the application
    app = TermailApp(config=config, config_error=config_error)
    app.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
