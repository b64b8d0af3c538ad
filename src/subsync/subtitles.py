"""
SubRip (.srt) document model, parser and serializer.
"""
import io
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Union

from .errors import EmptyDocumentError, ParseError, TimestampError
from .timecodes import format_time, parse_time
from .logging import get_logger


TEXT_ENCODING = "utf-8";
TEXT_ERRORS = "surrogateescape";  # Undecodable bytes pass through unchanged

UTF8_BOM = "\ufeff";
TIMING_ARROW = "-->";
INDEX_PATTERN = re.compile( r'[0-9]+' );

EOL = b"\r\n";


@dataclass
class Cue:
    """A single subtitle entry: timing in milliseconds plus opaque text."""

    start: int;  # Start time in milliseconds
    end: int;    # End time in milliseconds
    text: str = "";  # Body lines, each terminated by "\n"

    @property
    def duration( self ) -> int:
        return self.end - self.start;

    @property
    def lines( self ) -> List[str]:
        """Body lines without terminators."""
        lines = self.text.split( "\n" );
        if lines[-1] == "":
            lines.pop();
        return lines;

    def __repr__( self ):
        return f"Cue(start={self.start}ms, end={self.end}ms, text={self.text[:30]!r})";


class SubtitleDocument:
    """
    Ordered sequence of cues in display order.

    Cues carry no index of their own; the serializer numbers them 1..n.
    Overlapping or out-of-order cues are kept as found.
    """

    def __init__( self, cues: Optional[Iterable[Cue]] = None ):
        self.cues: List[Cue] = list( cues ) if cues else [];

    def append( self, cue: Cue ):
        self.cues.append( cue );

    def __len__( self ):
        return len( self.cues );

    def __iter__( self ) -> Iterator[Cue]:
        return iter( self.cues );

    def __getitem__( self, position ):
        return self.cues[position];

    @property
    def first( self ) -> Cue:
        """First cue in display order."""
        if not self.cues:
            raise EmptyDocumentError();
        return self.cues[0];

    @property
    def last( self ) -> Cue:
        """Last cue in display order."""
        if not self.cues:
            raise EmptyDocumentError();
        return self.cues[-1];

    def __repr__( self ):
        return f"SubtitleDocument({len( self.cues )} cues)";


class ParserState( Enum ):
    INDEX = "index";
    TIMING = "timing";
    BODY = "body";


class SrtParser:
    """
    Line-driven state machine for the SubRip grammar.

    Each cue is read as INDEX -> TIMING -> BODY, and a blank line in BODY
    returns to INDEX. Input may only end in INDEX or BODY.

    Usage:
        parser = SrtParser();
        for line in lines:
            parser.feed( line );
        document = parser.finish();
    """

    def __init__( self ):
        self.logger = get_logger();
        self.document = SubtitleDocument();
        self.state = ParserState.INDEX;
        self.line_number = 0;
        self._pending: Optional[Cue] = None;
        self._body: List[str] = [];

    def feed( self, line: str ) -> ParserState:
        """
        Consume one line (without its terminator) and advance the machine.

        Args:
            line: Decoded line content

        Returns:
            The state the parser is in after this line

        Raises:
            ParseError: If the line does not fit the current state
        """
        self.line_number += 1;

        if self.line_number == 1 and line.startswith( UTF8_BOM ):
            line = line[len( UTF8_BOM ):];

        if self.state is ParserState.INDEX:
            self.state = self._read_index( line );
        elif self.state is ParserState.TIMING:
            self.state = self._read_timing( line );
        else:
            self.state = self._read_body( line );

        return self.state;

    def finish( self ) -> SubtitleDocument:
        """
        Signal end of input and return the parsed document.

        Raises:
            ParseError: If input ended where a timing line was required
        """
        if self.state is ParserState.TIMING:
            raise ParseError( "wrong timing line", input="", line_number=self.line_number + 1 );

        if self.state is ParserState.BODY:
            self._complete_cue();
            self.state = ParserState.INDEX;

        self.logger.debug( f"Parsed {len( self.document )} cues from {self.line_number} lines" );
        return self.document;

    def _read_index( self, line: str ) -> ParserState:
        tokens = line.split();
        if len( tokens ) != 1 or not INDEX_PATTERN.fullmatch( tokens[0] ):
            raise ParseError( "wrong index line", input=line, line_number=self.line_number );
        return ParserState.TIMING;

    def _read_timing( self, line: str ) -> ParserState:
        tokens = line.split();
        if len( tokens ) != 3 or tokens[1] != TIMING_ARROW:
            raise ParseError( "wrong timing line", input=line, line_number=self.line_number );

        try:
            start = parse_time( tokens[0] );
            end = parse_time( tokens[2] );
        except TimestampError as e:
            e.at_line( self.line_number );
            raise;

        self._pending = Cue( start=start, end=end );
        self._body = [];
        return ParserState.BODY;

    def _read_body( self, line: str ) -> ParserState:
        if not line:
            self._complete_cue();
            return ParserState.INDEX;

        self._body.append( line + "\n" );
        return ParserState.BODY;

    def _complete_cue( self ):
        cue = self._pending;
        cue.text = "".join( self._body );

        if cue.end < cue.start:
            self.logger.warning( f"Cue {len( self.document ) + 1} ends before it starts " \
                                 f"({format_time( cue.start )} --> {format_time( cue.end )})" );

        self.document.append( cue );
        self._pending = None;
        self._body = [];


def _decode_line( raw: bytes ) -> str:
    """Strip the line terminator ("\\n" or "\\r\\n") and decode."""
    if raw.endswith( b"\n" ):
        raw = raw[:-1];
        if raw.endswith( b"\r" ):
            raw = raw[:-1];
    return raw.decode( TEXT_ENCODING, TEXT_ERRORS );


def parse( stream: BinaryIO ) -> SubtitleDocument:
    """
    Parse a SubRip document from a binary stream.

    Lines of any length are accepted. The stream is consumed but not closed.

    Args:
        stream: Binary file-like object positioned at the start of the document

    Returns:
        SubtitleDocument with every cue in file order
    """
    parser = SrtParser();
    for raw in stream:
        parser.feed( _decode_line( raw ) );
    return parser.finish();


def parse_bytes( data: bytes ) -> SubtitleDocument:
    """Parse a SubRip document held in memory."""
    return parse( io.BytesIO( data ) );


def read_srt( path: Union[str, Path] ) -> SubtitleDocument:
    """
    Read and parse a SubRip file.

    Args:
        path: Path to .srt file

    Returns:
        Parsed SubtitleDocument

    Raises:
        OSError: If the file cannot be opened or read
        ParseError: If the file is not valid SubRip
    """
    logger = get_logger();
    logger.debug( f"Reading subtitle file: {path}" );

    with open( path, "rb" ) as f:
        document = parse( f );

    logger.info( f"Parsed {len( document )} subtitle entries from {path}" );
    return document;


def serialize( document: SubtitleDocument, stream: BinaryIO ):
    """
    Write a document to a binary stream in SubRip format.

    Cues are renumbered from 1 and every line ends with CRLF.
    """
    for index, cue in enumerate( document, 1 ):
        stream.write( f"{index}".encode( "ascii" ) + EOL );
        stream.write( f"{format_time( cue.start )} {TIMING_ARROW} {format_time( cue.end )}".encode( "ascii" ) + EOL );
        for line in cue.lines:
            stream.write( line.encode( TEXT_ENCODING, TEXT_ERRORS ) + EOL );
        stream.write( EOL );


def compose( document: SubtitleDocument ) -> bytes:
    """Render a document to SubRip bytes in memory."""
    buffer = io.BytesIO();
    serialize( document, buffer );
    return buffer.getvalue();


def write_srt( path: Union[str, Path], document: SubtitleDocument ):
    """
    Write a document to a SubRip file, replacing any existing content.

    Raises:
        OSError: If the file cannot be created or written
    """
    logger = get_logger();
    logger.debug( f"Writing {len( document )} cues to {path}" );

    with open( path, "wb" ) as f:
        serialize( document, f );

    logger.info( f"Saved {len( document )} subtitle entries to {path}" );
