# log.py

import logging
import uuid
from typing import Dict

# --- Logging Setup ---
logger = logging.getLogger("jenkins_admin")
logger.setLevel(logging.INFO)

handler = logging.StreamHandler()

# Timestamp, logger name, log level and the message.
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)

# Skip when the application already attached its own handlers.
if not logger.handlers:
    logger.addHandler(handler)


def get_request_context() -> Dict[str, str]:
    """
    Creates a context dictionary for a single operation.

    Returns:
        Dict containing a unique request ID for logging and tracing
    """
    return {"request_id": str(uuid.uuid4())}
