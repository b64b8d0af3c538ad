"""
Test cases for timestamp parsing and formatting.
"""
import pytest
from pathlib import Path
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from subsync.errors import ParseError, TimestampError
from subsync.timecodes import format_time, parse_time


class TestParseTime:
    """Test cases for converting timestamps to milliseconds."""

    def test_comma_separator( self ):
        """Test the canonical SubRip form."""
        assert parse_time( "01:02:03,456" ) == 3723456;

    def test_dot_separator( self ):
        """Test that a dot is accepted before the milliseconds."""
        assert parse_time( "00:00:01.500" ) == 1500;

    def test_single_digit_hour( self ):
        """Test that hours may have any number of digits."""
        assert parse_time( "1:00:00,000" ) == 3600000;
        assert parse_time( "100:00:00,000" ) == 360000000;

    def test_zero( self ):
        """Test the zero timestamp."""
        assert parse_time( "00:00:00,000" ) == 0;

    def test_malformed_timestamps( self ):
        """Test rejection of wrong field counts and non-numeric fields."""
        bad_inputs = [
            "",
            "00:00:01",
            "00:01,000",
            "00:00:01,000,000",
            "00:00:0a,000",
            "-1:00:00,000",
            "00.00.01.000",  # Only the first dot is normalized
            "00:00:01,000 ",
        ];

        for text in bad_inputs:
            with pytest.raises( TimestampError ):
                parse_time( text );

    def test_error_details( self ):
        """Test that the error carries reason and input."""
        with pytest.raises( ParseError ) as excinfo:
            parse_time( "12:34" );

        assert excinfo.value.reason == "malformed timestamp";
        assert excinfo.value.input == "12:34";
        assert "12:34" in str( excinfo.value );


class TestFormatTime:
    """Test cases for converting milliseconds to timestamps."""

    def test_canonical_form( self ):
        """Test zero padding of every field."""
        assert format_time( 0 ) == "00:00:00,000";
        assert format_time( 3723456 ) == "01:02:03,456";
        assert format_time( 61001 ) == "00:01:01,001";

    def test_hours_widen( self ):
        """Test that hours beyond 99 are not truncated."""
        assert format_time( 100 * 3600000 ) == "100:00:00,000";

    def test_field_widths( self ):
        """Test fixed widths and separators across a range of values."""
        for ms in [ 0, 1, 999, 1000, 59999, 60000, 3599999, 3600000, 86399999 ]:
            text = format_time( ms );
            hms, fraction = text.split( "," );
            hours, minutes, seconds = hms.split( ":" );

            assert len( fraction ) == 3;
            assert len( minutes ) == 2;
            assert len( seconds ) == 2;
            assert len( hours ) >= 2;

    def test_negative_rejected( self ):
        """Test that negative times cannot be formatted."""
        with pytest.raises( ValueError ):
            format_time( -1 );

    def test_round_trip( self ):
        """Test value-level round trip for a spread of times."""
        for ms in [ 0, 7, 1500, 59999, 3599999, 3600000, 5025678, 360000001 ]:
            assert parse_time( format_time( ms ) ) == ms;

    def test_round_trip_normalizes_text( self ):
        """Test that round trip is by value, not by text."""
        assert format_time( parse_time( "1:02:03.004" ) ) == "01:02:03,004";


if __name__ == '__main__':
    pytest.main( [ __file__ ] );
