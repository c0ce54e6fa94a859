"""
Haupteinstiegspunkt für Blockfall.
"""
import argparse
import logging
import os
import sys

from .config_schema import ConfigValidator, SimulationConfig, validate_config_file
from .constants import DEFAULT_CONFIG_FILE
from .driver import SimulationDriver
from .logger import get_logger, set_console_log_level, setup_logging
from .renderer import FrameRenderer
from .scheduler import ClockScheduler
from .sinks import CompositeSink, DisplaySink, MemorySink, VideoRecordingSink

logger = get_logger(__name__)

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}


def load_config(config_path=None):
    """
    Lädt und validiert Konfiguration.

    Args:
        config_path: Pfad zur config.json (None = config.json im Arbeitsverzeichnis, falls vorhanden)

    Returns:
        dict: Validierte Konfiguration oder Standard-Konfiguration
    """
    validator = ConfigValidator()

    if config_path is None:
        if not os.path.exists(DEFAULT_CONFIG_FILE):
            logger.info("Keine config.json gefunden, verwende Standard-Konfiguration")
            return validator.get_default_config()
        config_path = DEFAULT_CONFIG_FILE

    is_valid, errors, config = validate_config_file(config_path)

    if not is_valid:
        logger.warning("⚠️  Config-Validierung fehlgeschlagen:")
        for error in errors:
            logger.warning(f"    - {error}")
        logger.warning("⚠️  Verwende Standard-Konfiguration")
        return validator.get_default_config()

    logger.info(f"Konfiguration geladen: {config_path}")
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='blockfall', description="Falling blocks visual effect")
    parser.add_argument('--config', help="Pfad zur config.json")
    parser.add_argument('--seed', type=int, help="Seed für reproduzierbare Läufe")
    parser.add_argument('--fps', type=float, help="Ziel-Framerate")
    parser.add_argument('--frames', type=int, help="Nach N Frames beenden")
    parser.add_argument('--headless', action='store_true', help="Kein Fenster öffnen")
    parser.add_argument('--record', metavar='PATH', help="Frames in eine Videodatei schreiben")
    parser.add_argument('--log-level', choices=sorted(LOG_LEVELS), help="Console-Log-Level")
    return parser


def main(argv=None):
    """Hauptfunktion der Anwendung."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.seed is not None:
        config['simulation']['seed'] = args.seed
    if args.fps is not None:
        config['render']['fps'] = args.fps

    # CLI-Overrides durchlaufen dieselbe Validierung wie die Datei
    is_valid, errors = ConfigValidator().validate(config)
    if not is_valid:
        parser.error("; ".join(errors))
    if args.frames is not None and args.frames < 0:
        parser.error("--frames darf nicht negativ sein")

    # Logging nach dem Laden der Config neu einrichten
    app_config = config.get('app', {})
    setup_logging(
        log_dir=app_config.get('log_dir'),
        console_level=LOG_LEVELS.get(app_config.get('console_log_level', 'WARNING'), logging.WARNING)
    )
    if args.log_level:
        set_console_log_level(LOG_LEVELS[args.log_level])

    settings = SimulationConfig.from_dict(config)
    renderer = FrameRenderer(
        rows=settings.rows,
        cols=settings.cols,
        cell_size=settings.cell_size,
        group_size=settings.group_size,
        fade=settings.fade,
        glow=settings.glow
    )
    scheduler = ClockScheduler(fps=settings.fps, max_frames=args.frames)

    sinks = []
    display = None
    if not args.headless:
        display = DisplaySink(renderer)
        sinks.append(display)
    if args.record:
        sinks.append(VideoRecordingSink(renderer, args.record, fps=settings.fps))
    if not sinks:
        sinks.append(MemorySink(history_length=1))

    sink = CompositeSink(sinks)
    driver = SimulationDriver.from_config(settings, sink=sink, scheduler=scheduler)
    if display is not None:
        display.on_close = driver.stop

    try:
        driver.start()
        scheduler.run()
    except KeyboardInterrupt:
        logger.info("Abbruch durch Benutzer (Ctrl+C)")
    finally:
        driver.stop()
        sink.close()

    stats = driver.stats()
    logger.info(
        f"Statistik: {stats['frames']} Frames, {stats['groups_spawned']} Gruppen, "
        f"{stats['spawns_rejected']} Spawns verworfen"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
