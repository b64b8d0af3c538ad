"""
Conversion between SubRip timestamps (HH:MM:SS,mmm) and integer milliseconds.
"""
import re

from .errors import TimestampError


TIMESTAMP_PATTERN = re.compile( r'([0-9]+):([0-9]+):([0-9]+),([0-9]+)' );

MS_PER_HOUR = 60 * 60 * 1000;
MS_PER_MINUTE = 60 * 1000;
MS_PER_SECOND = 1000;


def parse_time( text: str ) -> int:
    """
    Convert a timestamp like "01:02:03,456" to milliseconds.

    A "." is accepted in place of the "," separator. Only the first "."
    is replaced, so "00.00.01.000" still fails.

    Args:
        text: Timestamp string

    Returns:
        Milliseconds since the media's zero point

    Raises:
        TimestampError: If the text is not exactly four integer fields
    """
    normalized = text.replace( ".", ",", 1 );
    match = TIMESTAMP_PATTERN.fullmatch( normalized );
    if not match:
        raise TimestampError( text );

    hours, minutes, seconds, milliseconds = ( int( field ) for field in match.groups() );

    return hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds * MS_PER_SECOND + milliseconds;


def format_time( milliseconds: int ) -> str:
    """
    Convert milliseconds to the canonical "HH:MM:SS,mmm" form.

    Hours are padded to two digits and widen past 99 as needed.
    """
    if milliseconds < 0:
        raise ValueError( f"Cannot format negative time: {milliseconds}" );

    hours = milliseconds // MS_PER_HOUR;
    minutes = ( milliseconds % MS_PER_HOUR ) // MS_PER_MINUTE;
    seconds = ( milliseconds % MS_PER_MINUTE ) // MS_PER_SECOND;
    fraction = milliseconds % MS_PER_SECOND;

    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{fraction:03d}";
