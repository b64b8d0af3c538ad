"""
Exception hierarchy for SubSync.

Every fatal condition is raised as one of these and reported once by the CLI.
"""
from typing import Optional


class SubSyncError( Exception ):
    """
    Base class for all SubSync errors.

    Attributes:
        hint: Optional follow-up line telling the user what to check
    """

    hint = None;


class ParseError( SubSyncError ):
    """
    Raised when subtitle or timestamp text does not follow the SubRip grammar.

    Attributes:
        reason: Short description of what was wrong ("wrong index line", ...)
        input: The offending text, if any
        line_number: 1-based line number in the source file, if known
    """

    def __init__( self, reason: str, input: Optional[str] = None, line_number: Optional[int] = None ):
        self.reason = reason;
        self.input = input;
        self.line_number = line_number;
        super().__init__( self._build_message() );

    def _build_message( self ) -> str:
        message = f"Parsing error: {self.reason}";
        if self.line_number is not None:
            message += f" at line {self.line_number}";
        if self.input is not None:
            message += f": `{self.input}'";
        return message;

    def at_line( self, line_number: int ) -> "ParseError":
        """Attach a line number and rebuild the message."""
        self.line_number = line_number;
        self.args = ( self._build_message(), );
        return self;


class TimestampError( ParseError ):
    """Raised when a timestamp cannot be converted to milliseconds."""

    def __init__( self, input: str, line_number: Optional[int] = None ):
        super().__init__( "malformed timestamp", input=input, line_number=line_number );


class SyncError( SubSyncError ):
    """Raised when a synchronization cannot be computed from the given anchors."""


class EmptyDocumentError( SyncError ):
    """Raised when an operation needs a first or last cue but there is none."""

    def __init__( self, message: str = "document contains no cues" ):
        super().__init__( message );
