"""
Linear re-synchronization of subtitle timing from two anchor timestamps.

Given the desired start of the first and last cue, a single affine mapping
y = slope * x + intercept is derived and applied to every timestamp.
"""
import math
from dataclasses import dataclass

from .errors import SyncError
from .subtitles import SubtitleDocument
from .timecodes import format_time
from .logging import get_logger


def round_half_away( value: float ) -> int:
    """
    Round to the nearest integer, ties away from zero.

    round_half_away( 2.5 ) == 3 and round_half_away( -2.5 ) == -3, unlike
    the built-in round() which rounds ties to even.
    """
    fraction = value - math.trunc( value );

    if fraction >= 0.5:
        return math.ceil( value );
    elif fraction > 0:
        return math.floor( value );
    elif fraction <= -0.5:
        return math.floor( value );
    elif fraction < 0:
        return math.ceil( value );
    return int( value );


@dataclass
class LinearMapping:
    """Affine time mapping new = slope * old + intercept, in milliseconds."""

    slope: float;
    intercept: float;

    def apply( self, milliseconds: int ) -> int:
        return round_half_away( self.slope * milliseconds + self.intercept );

    def __repr__( self ):
        return f"LinearMapping(slope={self.slope:.6f}, intercept={self.intercept:.1f}ms)";


def compute_mapping( desynced_first: int, desynced_last: int, synced_first: int, synced_last: int ) -> LinearMapping:
    """
    Derive the mapping that sends desynced_first -> synced_first and
    desynced_last -> synced_last.

    When both anchors share one original start time the line is undefined.
    If the targets coincide too, the mapping degrades to a plain shift;
    otherwise SyncError is raised.

    Args:
        desynced_first: Current start of the first cue (x1)
        desynced_last: Current start of the last cue (x2)
        synced_first: Desired start of the first cue (y1)
        synced_last: Desired start of the last cue (y2)

    Returns:
        LinearMapping with slope and intercept

    Raises:
        SyncError: If x1 == x2 but y1 != y2
    """
    if desynced_first == desynced_last:
        if synced_first != synced_last:
            raise SyncError(
                "cannot compute synchronization: first and last anchor timestamps are identical "
                f"({format_time( desynced_first )})"
            );
        return LinearMapping( slope=1.0, intercept=float( synced_first - desynced_first ) );

    # m = (y2 - y1) / (x2 - x1)
    slope = float( synced_last - synced_first ) / float( desynced_last - desynced_first );
    # b = y2 - m * x2
    intercept = float( synced_last ) - slope * float( desynced_last );

    return LinearMapping( slope=slope, intercept=intercept );


def validate_targets( synced_first: int, synced_last: int ):
    """
    Check that the requested first time does not come after the last.

    Raises:
        SyncError: If synced_first > synced_last
    """
    if synced_first > synced_last:
        raise SyncError( "First subtitle can not be after last subtitle." );


def resync( document: SubtitleDocument, synced_first: int, synced_last: int ) -> LinearMapping:
    """
    Re-time every cue in place so the first and last cue start at the given times.

    Start and end of every cue go through the same mapping. Text is untouched.
    Results below zero are clamped to 0.

    Args:
        document: Parsed subtitles, modified in place
        synced_first: Desired start of the first cue in milliseconds
        synced_last: Desired start of the last cue in milliseconds

    Returns:
        The LinearMapping that was applied

    Raises:
        EmptyDocumentError: If the document has no cues
        SyncError: If the anchors cannot define a mapping
    """
    logger = get_logger();

    mapping = compute_mapping(
        document.first.start,
        document.last.start,
        synced_first,
        synced_last
    );

    logger.debug( f"Anchors: {format_time( document.first.start )} -> {format_time( synced_first )}, " \
                  f"{format_time( document.last.start )} -> {format_time( synced_last )}" );
    logger.debug( f"Mapping: {mapping}" );

    clamped = 0;
    for cue in document:
        start = mapping.apply( cue.start );
        end = mapping.apply( cue.end );

        if start < 0 or end < 0:
            clamped += 1;
        cue.start = max( 0, start );
        cue.end = max( 0, end );

    if clamped:
        logger.warning( f"{clamped} cue(s) mapped before 00:00:00,000 and were clamped to zero" );

    logger.info( f"Resynchronized {len( document )} cues (slope={mapping.slope:.6f}, " \
                 f"offset={mapping.intercept / 1000:.3f}s)" );
    return mapping;
