"""Command line entry point: ``python -m pomogate`` / ``pomogate``."""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from . import __version__
from .errors import SettingsError, StatsError
from .logging_setup import configure_logging
from .settings import (
    LOG_DIR, SETTINGS_PATH, STATS_PATH,
    default_settings_json, load_settings, write_default_settings,
)

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomogate",
        description="Pomodoro timer that ends breaks with the next work goal",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-p", "--print-default-config", action="store_true",
        help="print the default configuration and exit",
    )
    group.add_argument(
        "-w", "--write-default-config", action="store_true",
        help="write the default configuration to the config path and exit",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, metavar="PATH",
        help=f"configuration file (default: {SETTINGS_PATH})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log debug output",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.print_default_config:
        sys.stdout.write(default_settings_json())
        return 0
    if args.write_default_config:
        try:
            path = write_default_settings(args.config)
        except OSError as exc:
            print(f"pomogate: cannot write config: {exc}", file=sys.stderr)
            return 1
        print(f"Wrote default configuration to {path}")
        return 0

    log_path = configure_logging(
        LOG_DIR, logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        settings = load_settings(args.config)
    except SettingsError as exc:
        log.error("%s", exc)
        print(f"pomogate: {exc}", file=sys.stderr)
        return 1

    # Qt is only needed once the scheduler actually starts.
    from PyQt6.QtWidgets import QApplication

    from .audio import SoundManager
    from .database import StatsStore
    from .timer.cycle import CycleController
    from .ui import MainWindow, TrayNotifier, spawn_break

    store = StatsStore(STATS_PATH)
    try:
        store.load()
    except StatsError as exc:
        log.error("cannot load stats", exc_info=exc)
        print(f"pomogate: {exc}", file=sys.stderr)
        return 1

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Pomogate")
    app.setOrganizationName("Pomogate")

    sounds = SoundManager(app)
    sounds.set_enabled(settings.sound_enabled)
    sounds.set_volume(settings.sound_volume)
    tray = TrayNotifier(settings.accent, app)

    controller = CycleController(
        settings,
        store,
        functools.partial(spawn_break, settings=settings, sounds=sounds),
        tray,
        app,
    )
    controller.heads_up.connect(lambda: sounds.play("heads_up"))
    controller.finished.connect(app.quit)

    window = MainWindow(controller, settings)
    window.show()
    log.info("pomogate %s started", __version__, extra={"fields": {
        "config": str(args.config or SETTINGS_PATH),
        "stats": str(STATS_PATH),
        "log": str(log_path),
    }})
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
