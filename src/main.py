from http.client import OK, BAD_REQUEST, INTERNAL_SERVER_ERROR

from src.logger import setup_logger # Import the custom logger
log = setup_logger(__name__) # Setup logger for this module

import src.config as config
import src.message_parser as message_parser
import src.record_formatter as record_formatter
import src.sheets_handler as sheets_handler
import src.line_handler as line_handler
from src.models import Command

# Built once per function instance; .env is only used for local development
CONFIG = config.load_config()

def _parse_payload(request):
    """Parses the webhook JSON body. Returns None if it is not a JSON object."""
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        return None
    return payload

def _event_type_error(event):
    """Returns a description of the first field of an event with the wrong JSON type, or None."""
    message = event.get("message")
    if message is not None and not isinstance(message, dict):
        return "'message' must be an object"
    if isinstance(message, dict) and not isinstance(message.get("text", ""), str):
        return "'message.text' must be a string"
    timestamp = event.get("timestamp")
    if timestamp is not None and (isinstance(timestamp, bool) or not isinstance(timestamp, int)):
        return "'timestamp' must be an integer"
    return None

def _first_text_event(payload):
    """
    Picks the first event of the delivery if it is a text message event.

    LINE may batch several events in one delivery; only the first is handled.

    Returns:
        (event, error_response): event is None when there is nothing to handle;
        error_response is set when the event has fields of the wrong type.
    """
    events = payload.get("events") or []
    if not isinstance(events, list) or not events:
        log.info("Webhook contained no events.")
        return None, None

    event = events[0]
    if not isinstance(event, dict):
        log.warning("First event is not a JSON object.")
        return None, ({"message": "Event must be a JSON object."}, BAD_REQUEST)

    type_error = _event_type_error(event)
    if type_error:
        log.warning(f"Malformed event: {type_error}.")
        return None, ({"message": f"Malformed event: {type_error}."}, BAD_REQUEST)

    message = event.get("message") or {}
    if event.get("type") != "message" or message.get("type") != "text":
        log.info(f"Ignoring event of type '{event.get('type')}' (message type '{message.get('type')}').")
        return None, None
    return event, None

def handle_fetch_history(cfg):
    """
    Reads all stored rows and pushes them to the configured LINE user.

    A read failure returns 500; a failed push is only logged.
    """
    service = sheets_handler.build_sheets_service(cfg.credentials_file)
    if service is None:
        return {"message": "Sheets client unavailable."}, INTERNAL_SERVER_ERROR

    rows = sheets_handler.read_rows(service, cfg.spreadsheet_id, cfg.sheet_range)
    if rows is None:
        log.error("Get sheet data failed.")
        return {"message": "Failed to read sheet data."}, INTERNAL_SERVER_ERROR

    lines = record_formatter.format_history(rows)
    if not line_handler.push_text(cfg.line_user_id, cfg.line_bearer_token, "\n".join(lines)):
        log.error("Send LINE message failed.")

    return {"message": f"Sent {len(lines)} records."}, OK

def handle_measurement(record, cfg):
    """
    Appends a parsed record to the sheet.

    Append failures are logged but still acknowledged with 200 so that LINE
    does not redeliver the event.
    """
    row = record_formatter.to_sheet_row(record)
    service = sheets_handler.build_sheets_service(cfg.credentials_file)
    if service is None or not sheets_handler.append_row(service, cfg.spreadsheet_id, cfg.sheet_range, row):
        log.error(f"Append failed: {record_formatter.format_record_summary(record)}")
        return {"message": "OK"}, OK

    log.info(f"Appended: {record_formatter.format_record_summary(record)}")
    return {"message": "OK"}, OK

def handle_webhook(payload, cfg):
    """
    Dispatches a decoded webhook payload.

    Args:
        payload: The decoded JSON envelope ({"destination": ..., "events": [...]}).
        cfg: The instance Config.

    Returns:
        A (response body, HTTP status) tuple.
    """
    event, error_response = _first_text_event(payload)
    if error_response:
        return error_response
    if event is None:
        return {"message": "Ignored."}, OK

    text = event["message"].get("text") or ""
    try:
        parsed = message_parser.parse_message(text, event.get("timestamp"), cfg.tzinfo())
    except message_parser.MessageParseError as e:
        log.warning(f"Message not stored ({e.__class__.__name__}): {text!r}")
        return {"message": "Message not stored."}, OK

    if parsed is Command.FETCH_HISTORY:
        return handle_fetch_history(cfg)
    return handle_measurement(parsed, cfg)

def webhook_entrypoint(request):
    """
    Main entry point for the Cloud Function.
    Receives LINE webhook deliveries and stores or replies with measurements.
    """
    payload = _parse_payload(request)
    if payload is None:
        log.warning("Request payload is missing or not valid JSON.")
        return {"message": "Request payload is missing or not valid JSON."}, BAD_REQUEST

    return handle_webhook(payload, CONFIG)
