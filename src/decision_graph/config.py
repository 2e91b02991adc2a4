import os

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Logging level used by the command line (overridden by --log-level)
LOG_LEVEL = os.getenv("DECISION_GRAPH_LOG_LEVEL", "WARNING").upper()

# Serialization format assumed for files without a .json/.yaml/.yml extension
DEFAULT_FORMAT = os.getenv("DECISION_GRAPH_FORMAT", "json").lower()
