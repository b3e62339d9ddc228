"""
Servicio de logging siguiendo principio Single Responsibility
"""
import logging
import sys
from datetime import datetime
from .config import Config


class LoggerService:
    """Servicio centralizado de logging"""

    _loggers = {}
    _level = Config.LOG_LEVEL

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Obtiene o crea un logger con el nombre especificado

        Args:
            name: Nombre del logger

        Returns:
            Logger configurado
        """
        if name in cls._loggers:
            return cls._loggers[name]

        logger = cls._setup_logger(name)
        cls._loggers[name] = logger
        return logger

    @classmethod
    def set_level(cls, level: int):
        """
        Cambia el nivel de todos los loggers creados y de los futuros

        Args:
            level: Nivel de logging (logging.DEBUG, logging.INFO...)
        """
        cls._level = level
        for logger in cls._loggers.values():
            logger.setLevel(level)
            for handler in logger.handlers:
                handler.setLevel(level)

    @classmethod
    def _setup_logger(cls, name: str) -> logging.Logger:
        """
        Configura un nuevo logger

        Args:
            name: Nombre del logger

        Returns:
            Logger configurado
        """
        logger = logging.getLogger(f"proman.{name}")
        logger.setLevel(cls._level)
        logger.propagate = False

        # Evitar duplicar handlers
        if logger.handlers:
            return logger

        # Handler para consola: stderr, stdout queda para la salida de los comandos
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(cls._level)
        console_handler.setFormatter(logging.Formatter(Config.CONSOLE_FORMAT))
        logger.addHandler(console_handler)

        # Handler para archivo
        try:
            Config.ensure_directories()
            log_file = Config.LOG_DIR / f"proman_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logger.debug(f"No se pudo abrir el archivo de log: {e}")
        else:
            file_handler.setLevel(cls._level)
            file_handler.setFormatter(logging.Formatter(Config.LOG_FORMAT))
            logger.addHandler(file_handler)

        return logger
