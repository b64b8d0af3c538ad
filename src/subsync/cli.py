"""
CLI entry point for SubSync with argument parsing and environment variable loading.
"""
import argparse
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

from . import __version__
from .errors import ParseError, SubSyncError, SyncError
from .logging import setup_logging
from .subtitles import SubtitleDocument, parse, read_srt, serialize, write_srt
from .sync import resync, validate_targets
from .timecodes import format_time, parse_time


STDIO_PATH = "-";
TRUTHY_VALUES = { "1", "true", "yes", "on" };

EXAMPLE = "Example:\n  subsync -f 00:01:33,492 -l 01:39:23,561 -i file.srt";


class ArgumentParsingError( Exception ):
    """Raised instead of printing usage when the command line is invalid."""


class _ArgumentParser( argparse.ArgumentParser ):
    """ArgumentParser that leaves error reporting to the caller."""

    def error( self, message ):
        raise ArgumentParsingError( message );


def _describe_os_error( error: OSError ) -> str:
    if error.filename is not None:
        return f"open: {error.filename}: {error.strerror}";
    return str( error );


class SubSyncCLI:
    """
    Command line interface for SubSync.

    Reads settings from the command line, falling back to environment
    variables (optionally from a .env file) for logging options.
    """

    def __init__( self ):
        self.parser = self._create_parser();
        self.args = None;
        self.logger = None;
        self.env_debug = False;
        self.env_log_file = None;

    def _create_parser( self ):
        """Create argument parser with all SubSync options."""
        parser = _ArgumentParser(
            prog="subsync",
            description="Synchronize SubRip subtitles from the correct times of the first and last subtitle",
            epilog=f"{EXAMPLE}\n\nEnvironment variables: SUBSYNC_DEBUG, SUBSYNC_LOG_FILE",
            formatter_class=argparse.RawDescriptionHelpFormatter
        );

        parser.add_argument(
            "-f", "--first-sub",
            metavar="TIME",
            help="Time of the first subtitle (default: its current time)"
        );

        parser.add_argument(
            "-l", "--last-sub",
            metavar="TIME",
            help="Time of the last subtitle (default: its current time)"
        );

        parser.add_argument(
            "-i", "--input",
            required=True,
            metavar="PATH",
            help="Input file ('-' reads standard input)"
        );

        parser.add_argument(
            "-o", "--output",
            metavar="PATH",
            help="Output file (if not specified, it overwrites the input file; '-' writes standard output)"
        );

        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Compute the synchronization without writing any file"
        );

        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode with verbose output"
        );

        parser.add_argument(
            "--log-file",
            type=Path,
            metavar="PATH",
            help="Also write log messages to this file (rotated at 5MB)"
        );

        parser.add_argument(
            "-v", "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        );

        return parser;

    def _load_environment( self ):
        """Load environment variables from .env file and system."""
        env_file = Path( ".env" );
        if env_file.exists():
            load_dotenv( env_file );

        self.env_debug = os.getenv( "SUBSYNC_DEBUG", "" ).strip().lower() in TRUTHY_VALUES;
        log_file = os.getenv( "SUBSYNC_LOG_FILE" );
        self.env_log_file = Path( log_file ) if log_file else None;

    def parse_args( self, argv=None ):
        """
        Parse command line arguments and configure logging.

        Raises:
            ArgumentParsingError: If the command line is invalid
            SystemExit: After printing --help or --version
            OSError: If the log file cannot be opened
        """
        self.args = self.parser.parse_args( argv );

        self._load_environment();

        self.args.debug = self.args.debug or self.env_debug;
        if self.args.log_file is None:
            self.args.log_file = self.env_log_file;
        if self.args.output is None:
            self.args.output = self.args.input;

        self.logger = setup_logging( debug=self.args.debug, log_file=self.args.log_file );

        self.logger.debug( f"SubSync v{__version__} starting..." );
        self.logger.debug( f"Input: {self.args.input}" );
        self.logger.debug( f"Output: {self.args.output}" );

        return self.args;

    def _parse_target( self, value: str, option: str ) -> int:
        """Convert a -f/-l value, pointing the user at the option on failure."""
        try:
            return parse_time( value );
        except ParseError:
            self.logger.error( f"Please check the value of {option} option." );
            raise;

    def read_document( self ) -> SubtitleDocument:
        """Parse the input file, or standard input for '-'."""
        if self.args.input == STDIO_PATH:
            self.logger.debug( "Reading subtitles from standard input" );
            return parse( sys.stdin.buffer );
        return read_srt( self.args.input );

    def write_document( self, document: SubtitleDocument ):
        """Write the result to the output file, or standard output for '-'."""
        if self.args.output == STDIO_PATH:
            serialize( document, sys.stdout.buffer );
            sys.stdout.buffer.flush();
            return;
        write_srt( self.args.output, document );

    def synchronize( self ):
        """
        Run the read -> resync -> write pipeline for the parsed arguments.

        Raises:
            SubSyncError: On parse, validation or synchronization failures
            OSError: If a file cannot be read or written
        """
        first_ms = None;
        last_ms = None;

        if self.args.first_sub is not None:
            first_ms = self._parse_target( self.args.first_sub, "-f" );
        if self.args.last_sub is not None:
            last_ms = self._parse_target( self.args.last_sub, "-l" );

        document = self.read_document();

        # Missing anchors keep the current time of the first/last subtitle
        if first_ms is None:
            first_ms = document.first.start;
        if last_ms is None:
            last_ms = document.last.start;

        try:
            validate_targets( first_ms, last_ms );
        except SyncError as e:
            e.hint = "Please check the values of -f and/or -l options.";
            raise;

        self.logger.info( f"First subtitle: {format_time( document.first.start )} -> {format_time( first_ms )}" );
        self.logger.info( f"Last subtitle: {format_time( document.last.start )} -> {format_time( last_ms )}" );

        resync( document, first_ms, last_ms );

        if self.args.dry_run:
            self.logger.info( "Dry run completed - no files modified" );
            return document;

        self.write_document( document );
        return document;

    def run( self, argv=None ) -> int:
        """
        Parse arguments, synchronize, and report any failure.

        Returns:
            Process exit code
        """
        try:
            self.parse_args( argv );
        except ArgumentParsingError:
            return 1;
        except SystemExit as e:
            return e.code if isinstance( e.code, int ) else 0;
        except OSError as e:
            # No logger yet, the log file itself could not be opened
            print( _describe_os_error( e ), file=sys.stderr );
            return 1;

        try:
            self.synchronize();
        except SubSyncError as e:
            self.logger.error( str( e ) );
            if e.hint:
                self.logger.error( e.hint );
            return 1;
        except OSError as e:
            self.logger.error( _describe_os_error( e ) );
            return 1;
        except KeyboardInterrupt:
            self.logger.warning( "Interrupted by user" );
            return 130;
        except Exception as e:
            self.logger.error( f"Unexpected error: {e}" );
            if self.args.debug:
                raise;
            return 1;

        return 0;


def main():
    """Main entry point for the SubSync CLI."""
    sys.exit( SubSyncCLI().run() );


if __name__ == "__main__":
    main();
