import os
from dataclasses import dataclass
from typing import Optional

from dateutil import tz
from dotenv import load_dotenv

from src.logger import setup_logger # Import the custom logger
log = setup_logger(__name__) # Setup logger for this module

DEFAULT_CREDENTIALS_FILE = "credentials.json"
DEFAULT_SHEET_RANGE = "シート1!A:E"
DEFAULT_HOME_TIMEZONE = "Asia/Tokyo"

@dataclass(frozen=True)
class Config:
    """Settings for one function instance, passed to the Sheets and LINE handlers."""
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    spreadsheet_id: Optional[str] = None
    sheet_range: str = DEFAULT_SHEET_RANGE
    line_user_id: Optional[str] = None
    line_bearer_token: Optional[str] = None
    home_timezone: str = DEFAULT_HOME_TIMEZONE

    @classmethod
    def from_env(cls, environ=None):
        """
        Builds a Config from a mapping of environment variables.

        Empty strings are treated the same as unset variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            A Config instance.
        """
        env = os.environ if environ is None else environ

        def _get(key, default=None):
            value = env.get(key, "")
            value = value.strip() if value else ""
            return value or default

        return cls(
            credentials_file=_get("GOOGLE_CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE),
            spreadsheet_id=_get("SPREADSHEET_ID"),
            sheet_range=_get("SHEET_RANGE", DEFAULT_SHEET_RANGE),
            line_user_id=_get("LINE_USER_ID"),
            line_bearer_token=_get("LINE_BEARER_TOKEN"),
            home_timezone=_get("HOME_TIMEZONE", DEFAULT_HOME_TIMEZONE),
        )

    def missing_settings(self):
        """Returns the names of required environment variables that are not set."""
        missing = []
        if not self.spreadsheet_id:
            missing.append("SPREADSHEET_ID")
        if not self.line_user_id:
            missing.append("LINE_USER_ID")
        if not self.line_bearer_token:
            missing.append("LINE_BEARER_TOKEN")
        return missing

    def tzinfo(self):
        """Resolves home_timezone, falling back to UTC for unknown zone names."""
        zone = tz.gettz(self.home_timezone)
        if zone is None:
            log.warning(f"Unknown time zone '{self.home_timezone}', falling back to UTC.")
            return tz.UTC
        return zone

def load_config(dotenv_path=".env"):
    """
    Loads .env (when present) and builds the Config for this instance.

    Existing environment variables win over values from the .env file, so the
    deployed function's settings are never overridden.
    """
    load_dotenv(dotenv_path)
    config = Config.from_env()

    missing = config.missing_settings()
    if missing:
        log.warning(f"Missing required environment variables: {', '.join(missing)}")

    return config
