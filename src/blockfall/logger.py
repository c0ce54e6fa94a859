"""
Zentrales Logging-System für Blockfall
"""
import logging
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler


class BlockfallLogger:
    """Zentraler Logger mit Konsolen- und optionaler Datei-Ausgabe."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(BlockfallLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not BlockfallLogger._initialized:
            self.setup_logging()  # Wird mit Defaults initialisiert
            BlockfallLogger._initialized = True

    def setup_logging(self, log_dir=None, log_level=logging.INFO, console_level=logging.WARNING):
        """
        Richtet das Logging-System ein.

        Args:
            log_dir: Verzeichnis für Log-Dateien (None = nur Konsole)
            log_level: Logging-Level für Root Logger
            console_level: Logging-Level für Konsole (Standard: WARNING)

        Returns:
            Path: Pfad der Log-Datei oder None
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Entferne existierende Handler
        root_logger.handlers.clear()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(levelname)-8s | %(name)s | %(message)s'
        )

        log_file = None
        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = log_path / f'blockfall_{timestamp}.log'

            # Datei-Handler mit Rotation (max 10MB, 5 Backup-Dateien)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10*1024*1024,  # 10 MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(console_formatter)

        # Startup-Log nur in Datei, Console-Handler kommt danach
        if log_file is not None:
            root_logger.info("=" * 80)
            root_logger.info("Blockfall gestartet")
            root_logger.info(f"Log-Datei: {log_file}")
            root_logger.info("=" * 80)

        root_logger.addHandler(console_handler)
        self.console_handler = console_handler
        self.log_file = log_file

        return log_file

    def set_console_log_level(self, level):
        """
        Ändert das Log-Level für die Konsolen-Ausgabe.

        Args:
            level: logging.DEBUG, logging.INFO, logging.WARNING, etc.
        """
        if hasattr(self, 'console_handler'):
            self.console_handler.setLevel(level)
            level_name = logging.getLevelName(level)
            logging.getLogger('blockfall.logger').debug(f"Console-Log-Level auf {level_name} gesetzt")

    def get_console_log_level(self):
        """
        Gibt das aktuelle Console-Log-Level zurück.

        Returns:
            int: Aktuelles Log-Level (z.B. logging.WARNING)
        """
        if hasattr(self, 'console_handler'):
            return self.console_handler.level
        return logging.WARNING


def get_logger(name):
    """
    Convenience-Funktion zum Holen eines Loggers.

    Args:
        name: Name des Loggers (meist __name__)

    Returns:
        logging.Logger: Konfigurierter Logger
    """
    # Stelle sicher, dass BlockfallLogger initialisiert ist
    BlockfallLogger()
    return logging.getLogger(name)


def setup_logging(log_dir=None, console_level=logging.WARNING):
    """Konfiguriert das Logging neu (z.B. nach dem Laden der Config)."""
    return BlockfallLogger().setup_logging(log_dir=log_dir, console_level=console_level)


def set_console_log_level(level):
    """Ändert das Console-Log-Level."""
    BlockfallLogger().set_console_log_level(level)


def get_console_log_level():
    """Gibt das aktuelle Console-Log-Level zurück."""
    return BlockfallLogger().get_console_log_level()


def log_performance(logger, operation, duration_ms):
    """
    Loggt Performance-Metriken.

    Args:
        logger: Logger-Instanz
        operation: Name der Operation
        duration_ms: Dauer in Millisekunden
    """
    if duration_ms > 1000:
        logger.warning(f"Performance: {operation} dauerte {duration_ms:.2f}ms (>1s)")
    else:
        logger.debug(f"Performance: {operation} dauerte {duration_ms:.2f}ms")
