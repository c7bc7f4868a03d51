import math
import unicodedata
from datetime import datetime

from dateutil import tz

from src.logger import setup_logger # Import the custom logger
from src.models import Command, MeasurementRecord

log = setup_logger(__name__) # Setup logger for this module

MAX_LINES = 4
OPTIONAL_FIELDS = ("body_fat", "body_water", "body_muscle")

class MessageParseError(ValueError):
    """Base class for messages that cannot be turned into a record."""

class EmptyMessageError(MessageParseError):
    pass

class TooManyLinesError(MessageParseError):
    pass

class WeightParseError(MessageParseError):
    pass

class InvalidTimestampError(MessageParseError):
    pass

def split_non_empty_lines(text):
    """Splits text on newlines, trimming each line and dropping blank ones."""
    return [line.strip() for line in text.strip().split("\n") if line.strip()]

def parse_number(value):
    """
    Parses a decimal number typed into a chat message.

    Full-width characters (e.g. '６５．２') are normalised first.
    Returns None when the value is not a finite number.
    """
    normalized = unicodedata.normalize("NFKC", value).strip()
    if not normalized:
        return None
    try:
        number = float(normalized)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number

def parse_optional_number(value, field_name):
    """Parses an optional field, logging and returning None on failure."""
    number = parse_number(value)
    if number is None:
        log.warning(f"Optional value parse error for {field_name}: {value!r}")
    return number

def event_date(timestamp_ms, tzinfo=None):
    """
    Converts an event timestamp (epoch milliseconds) to a calendar date.

    The timestamp is truncated toward zero to whole seconds and converted to
    tzinfo (UTC when not given). A missing timestamp (None) means "now".

    Raises:
        InvalidTimestampError: If the timestamp is not an integer or is out of range.
    """
    tzinfo = tzinfo or tz.UTC
    if timestamp_ms is None:
        return datetime.now(tzinfo).date()
    if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, int):
        raise InvalidTimestampError(f"Timestamp is not an integer: {timestamp_ms!r}")

    seconds = abs(timestamp_ms) // 1000
    if timestamp_ms < 0:
        seconds = -seconds
    try:
        return datetime.fromtimestamp(seconds, tz=tzinfo).date()
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidTimestampError(f"Timestamp out of range: {timestamp_ms!r}") from e

def parse_message(text, timestamp_ms, tzinfo=None):
    """
    Parses a message into a MeasurementRecord or a Command.

    A measurement message is one to four non-empty lines: weight (required),
    then body fat %, body water % and muscle mass. The record date comes from
    the event timestamp, never from the text.

    Args:
        text: Raw message text.
        timestamp_ms: Event timestamp in epoch milliseconds.
        tzinfo: Home time zone used to derive the record date.

    Returns:
        Command.FETCH_HISTORY for the exact text "get", otherwise a MeasurementRecord.

    Raises:
        EmptyMessageError: If the text has no non-empty lines.
        TooManyLinesError: If the text has more than four non-empty lines.
        WeightParseError: If the first line is not a number.
        InvalidTimestampError: If the timestamp cannot be turned into a date.
    """
    text = text or ""
    if text.strip() == Command.FETCH_HISTORY.value:
        return Command.FETCH_HISTORY

    lines = split_non_empty_lines(text)
    if not lines:
        raise EmptyMessageError("Message is empty")
    if len(lines) > MAX_LINES:
        raise TooManyLinesError(f"Expected at most {MAX_LINES} lines, got {len(lines)}")

    weight = parse_number(lines[0])
    if weight is None:
        raise WeightParseError(f"Weight is not a number: {lines[0]!r}")

    optional = {
        field_name: parse_optional_number(line, field_name)
        for field_name, line in zip(OPTIONAL_FIELDS, lines[1:])
    }

    return MeasurementRecord(
        date=event_date(timestamp_ms, tzinfo),
        weight=weight,
        **optional,
    )
