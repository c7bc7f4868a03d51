from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from src.logger import setup_logger # Import the custom logger
log = setup_logger(__name__) # Setup logger for this module

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

def build_sheets_service(credentials_file):
    """
    Builds a Google Sheets API client from a service account key file.

    Args:
        credentials_file: Path to the service account JSON key.

    Returns:
        A Sheets API service object if successful, None otherwise.
    """
    if not credentials_file:
        log.error("No credentials file configured (GOOGLE_CREDENTIALS_FILE).")
        return None
    try:
        credentials = service_account.Credentials.from_service_account_file(
            credentials_file, scopes=SHEETS_SCOPES)
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        log.info("Google Sheets client initialized.")
        return service
    except (OSError, ValueError) as e:
        log.error(f"Cannot read credentials file {credentials_file}: {e}")
        return None
    except GoogleAuthError as e:
        log.error(f"Failed to parse credentials from {credentials_file}: {e}")
        return None
    except Exception as e:
        log.error(f"An unexpected error occurred creating the Sheets client: {e}")
        return None

def append_row(service, spreadsheet_id, sheet_range, row):
    """
    Appends one row to the sheet.

    Values are sent as USER_ENTERED so numeric strings are stored as numbers,
    and the sheet grows by inserting rows instead of overwriting.

    Args:
        service: Sheets API service object.
        spreadsheet_id: Target spreadsheet ID.
        sheet_range: A1 range such as "シート1!A:E".
        row: List of cell values.

    Returns:
        True if the append succeeded, False otherwise.
    """
    if not spreadsheet_id:
        log.error("Missing spreadsheet id (SPREADSHEET_ID).")
        return False
    try:
        service.spreadsheets().values().append(
            spreadsheetId=spreadsheet_id,
            range=sheet_range,
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": [row]},
        ).execute()
        log.info(f"Row appended to {sheet_range}")
        return True
    except HttpError as e:
        log.error(f"Sheets append to {sheet_range} failed: {e}")
        return False
    except Exception as e:
        log.error(f"An unexpected error occurred appending to {sheet_range}: {e}")
        return False

def read_rows(service, spreadsheet_id, sheet_range):
    """
    Reads every populated row in the range.

    Returns:
        A list of rows (each a list of cell values, possibly shorter than the
        range when trailing cells are empty), or None on failure.
    """
    if not spreadsheet_id:
        log.error("Missing spreadsheet id (SPREADSHEET_ID).")
        return None
    try:
        response = service.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=sheet_range,
        ).execute()
        rows = response.get("values", [])
        log.info(f"Read {len(rows)} rows from {sheet_range}")
        return rows
    except HttpError as e:
        log.error(f"Sheets read of {sheet_range} failed: {e}")
        return None
    except Exception as e:
        log.error(f"An unexpected error occurred reading {sheet_range}: {e}")
        return None
