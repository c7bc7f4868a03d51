import requests
from src.logger import setup_logger # Import the custom logger
log = setup_logger(__name__) # Setup logger for this module

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"
MAX_TEXT_LENGTH = 5000 # LINE limit per text message
MAX_MESSAGES_PER_PUSH = 5
EMPTY_HISTORY_TEXT = "No records yet."
REQUEST_TIMEOUT = 10

def build_text_messages(text):
    """
    Splits reply text into LINE text message objects.

    Text is split on line boundaries into messages of at most MAX_TEXT_LENGTH
    characters. Only the newest MAX_MESSAGES_PER_PUSH messages are kept,
    since a single push accepts no more than that.

    Args:
        text: Reply text, one record per line.

    Returns:
        A non-empty list of {"type": "text", "text": ...} dicts.
    """
    if not text or not text.strip():
        return [{"type": "text", "text": EMPTY_HISTORY_TEXT}]

    chunks = []
    current = ""
    for line in text.split("\n"):
        line = line[:MAX_TEXT_LENGTH]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > MAX_TEXT_LENGTH:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)

    if len(chunks) > MAX_MESSAGES_PER_PUSH:
        log.warning(f"Reply split into {len(chunks)} messages; sending the newest {MAX_MESSAGES_PER_PUSH}.")
        chunks = chunks[-MAX_MESSAGES_PER_PUSH:]

    return [{"type": "text", "text": chunk} for chunk in chunks]

def push_text(user_id, token, message):
    """
    Pushes a text reply to a single LINE user.

    Args:
        user_id: Recipient LINE user ID.
        token: Channel access token used as the bearer token.
        message: Text to send.

    Returns:
        True if LINE accepted the message, False otherwise.
    """
    if not user_id or not token:
        log.error("LINE_USER_ID or LINE_BEARER_TOKEN missing.")
        return False

    payload = {
        "to": user_id,
        "messages": build_text_messages(message),
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }

    try:
        response = requests.post(LINE_PUSH_URL, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        log.error(f"Error sending LINE push message: {e}")
        return False

    if response.status_code != 200:
        log.error(f"LINE API returned {response.status_code}: {response.text}")
        return False

    log.info(f"LINE push message sent ({len(payload['messages'])} message(s)).")
    return True
