"""
SubSync - Linear subtitle resynchronization utility.

Re-times SubRip subtitles from a known-correct first and last cue,
interpolating every cue in between.
"""

__version__ = "0.2.0";
__author__ = "SubSync Project";
__license__ = "MIT";

from .errors import SubSyncError, ParseError, TimestampError, SyncError, EmptyDocumentError
from .timecodes import parse_time, format_time
from .subtitles import Cue, SubtitleDocument, parse, parse_bytes, read_srt, serialize, compose, write_srt
from .sync import resync, round_half_away, compute_mapping, validate_targets, LinearMapping
