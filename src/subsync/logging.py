"""
Logging system for SubSync with Rich console output and optional rotating log file.
"""
import logging
import shutil
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


MAX_LOG_BYTES = 5 * 1024 * 1024;  # 5MB
LOG_BACKUP_COUNT = 5;


class SubSyncRichHandler( RichHandler ):
    """
    RichHandler that writes one unwrapped line per record when stderr is not a terminal.

    Rich falls back to 80 columns for pipes and files and would otherwise
    wrap paths in error messages across lines.
    """

    def render( self, *, record, traceback, message_renderable ):
        if self.console.is_terminal or traceback is not None or not isinstance( message_renderable, Text ):
            return super().render( record=record, traceback=traceback, message_renderable=message_renderable );

        level = Text( f"{record.levelname:<8} ", style=f"logging.level.{record.levelname.lower()}" );
        return Text.assemble( level, message_renderable );


class SubSyncLogger:
    """
    Logger wrapper for SubSync.

    Features:
    - Rich console output on stderr, so stdout can carry subtitle output
    - INFO default, DEBUG with --debug
    - Optional file logging with rotation, rotated on startup if >5MB
    """

    def __init__( self, name: str = "subsync", debug: bool = False, log_file: Optional[Path] = None ):
        self.name = name;
        self.debug_mode = debug;
        self.console = Console( stderr=True, soft_wrap=True );
        self.log_file = Path( log_file ) if log_file else None;

        if self.log_file:
            self.log_file.parent.mkdir( parents=True, exist_ok=True );
            self._check_and_rotate_on_startup();

        self.logger = self._setup_logger();

    def _check_and_rotate_on_startup( self ):
        """Move an oversized log file aside under an ISO-8601 timestamped name."""
        if self.log_file.exists() and self.log_file.stat().st_size > MAX_LOG_BYTES:
            timestamp = datetime.now().isoformat().replace( ":", "-" );
            backup_name = self.log_file.with_name( f"{self.log_file.stem}.{timestamp}{self.log_file.suffix}" );
            shutil.move( str( self.log_file ), str( backup_name ) );

    def _setup_logger( self ) -> logging.Logger:
        """Setup logger with Rich console and optional file handlers."""
        level = logging.DEBUG if self.debug_mode else logging.INFO;

        logger = logging.getLogger( self.name );
        logger.setLevel( level );

        for handler in list( logger.handlers ):
            logger.removeHandler( handler );
            handler.close();

        console_handler = SubSyncRichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=self.debug_mode,
            show_path=self.debug_mode
        );
        console_handler.setLevel( level );
        console_handler.setFormatter( logging.Formatter( "%(message)s" ) );
        logger.addHandler( console_handler );

        if self.log_file:
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8"
            );
            file_handler.setLevel( logging.DEBUG );
            file_handler.setFormatter( logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ) );
            logger.addHandler( file_handler );

        return logger;

    def debug( self, message, **kwargs ):
        """Log debug message."""
        self.logger.debug( message, **kwargs );

    def info( self, message, **kwargs ):
        """Log info message."""
        self.logger.info( message, **kwargs );

    def warning( self, message, **kwargs ):
        """Log warning message."""
        self.logger.warning( message, **kwargs );

    def error( self, message, **kwargs ):
        """Log error message."""
        self.logger.error( message, **kwargs );


# Global logger instance
_logger = None;


def get_logger() -> SubSyncLogger:
    """Get the global SubSync logger, creating a default one on first use."""
    global _logger;
    if _logger is None:
        _logger = SubSyncLogger();
    return _logger;


def setup_logging( debug: bool = False, log_file: Optional[Path] = None ) -> SubSyncLogger:
    """(Re)configure the global logger for this run."""
    global _logger;
    _logger = SubSyncLogger( debug=debug, log_file=log_file );
    return _logger;
