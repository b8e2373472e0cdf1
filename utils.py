import re
import os
from typing import Any, Optional, Pattern
from dotenv import load_dotenv

# Load DRIVE_ID_MIN_LENGTH (and friends) from .env
load_dotenv()

DEFAULT_MIN_ID_LENGTH = 10
MAX_MIN_ID_LENGTH = 256
DRIVE_ID_MARKERS = ("/d/", "folders/", "id=")


def build_drive_id_pattern(min_length: int) -> Pattern[str]:
    """Compiles the marker + identifier pattern for a given minimum ID length."""
    if not 1 <= min_length <= MAX_MIN_ID_LENGTH:
        raise ValueError(f"Minimum Google Drive ID length must be between 1 and {MAX_MIN_ID_LENGTH}, got {min_length}")
    markers = "|".join(re.escape(marker) for marker in DRIVE_ID_MARKERS)
    return re.compile(rf"(?:{markers})([A-Za-z0-9_-]{{{min_length},}})")


def load_min_id_length() -> int:
    """Reads DRIVE_ID_MIN_LENGTH from the environment, falling back to the default."""
    raw_value = os.getenv("DRIVE_ID_MIN_LENGTH")
    if not raw_value:
        return DEFAULT_MIN_ID_LENGTH
    try:
        min_length = int(raw_value)
    except ValueError:
        print(f"[DRIVE_ID] Warning: DRIVE_ID_MIN_LENGTH={raw_value!r} is not an integer, using {DEFAULT_MIN_ID_LENGTH}")
        return DEFAULT_MIN_ID_LENGTH
    if min_length < 1:
        print(f"[DRIVE_ID] Warning: DRIVE_ID_MIN_LENGTH must be positive, using {DEFAULT_MIN_ID_LENGTH}")
        return DEFAULT_MIN_ID_LENGTH
    if min_length > MAX_MIN_ID_LENGTH:
        print(f"[DRIVE_ID] Warning: DRIVE_ID_MIN_LENGTH must be at most {MAX_MIN_ID_LENGTH}, using {DEFAULT_MIN_ID_LENGTH}")
        return DEFAULT_MIN_ID_LENGTH
    return min_length


DRIVE_ID_MIN_LENGTH = load_min_id_length()
DRIVE_ID_PATTERN = build_drive_id_pattern(DRIVE_ID_MIN_LENGTH)


def extract_google_drive_file_id(url: Any, pattern: Optional[Pattern[str]] = None) -> Optional[str]:
    """Extracts the file or folder ID from a Google Drive URL.

    Looks for the first /d/, folders/ or id= marker followed by a run of
    ID characters at least as long as the pattern's minimum. Anything that
    is not a string yields None instead of raising.
    """
    if not isinstance(url, str):
        return None

    match = (pattern or DRIVE_ID_PATTERN).search(url)
    if match:
        return match.group(1)

    return None
