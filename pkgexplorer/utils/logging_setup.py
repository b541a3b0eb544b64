import os
import logging
import logging.handlers

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _ensure_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _file_handler(log_file: str) -> logging.Handler:
    rotate_mode = os.getenv("LOG_ROTATE", "size").lower()
    backup_count = int(os.getenv("LOG_BACKUP_COUNT", "10"))
    _ensure_dir(log_file)

    if rotate_mode == "time":
        fh = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when=os.getenv("LOG_WHEN", "midnight"),
            interval=int(os.getenv("LOG_INTERVAL", "1")),
            backupCount=backup_count,
            encoding="utf-8",
        )
        # e.g. explorer.log.2025-08-20_23-59-59
        fh.suffix = "%Y-%m-%d_%H-%M-%S"
        return fh

    return logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
        backupCount=backup_count,
        encoding="utf-8",
    )


def configure_logging_from_env(logger_name: str) -> logging.Logger:
    """Return a logger wired to the console (and optionally a rotating file).

    Every module calls this with its ``__name__``. Handlers are attached once,
    so reloading a module does not duplicate output.
    """
    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)
    logger.propagate = False

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    if os.getenv("LOG_TO_FILE", "false").lower() == "true":
        fh = _file_handler(os.getenv("LOG_FILE", "logs/explorer.log"))
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger
