"""Configuration and paths for Pipework."""
import os
from pathlib import Path

# Logs land under the directory the program is started from
OUTPUT_DIR = Path.cwd()

TRUTHY = ("1", "true", "yes", "on")


def env_flag(name: str, default: bool = False) -> bool:
    """Return True if the environment variable holds a truthy value."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


# Output files (written under the current working directory unless overridden)
LOG_DIR = Path(os.environ.get("PIPEWORK_LOG_DIR", str(OUTPUT_DIR / "pipework_logs")))
EXEC_LOG = LOG_DIR / "exec_log.json"

# Verbose prints progress to stderr; logging records every command without printing
VERBOSE = env_flag("PIPEWORK_VERBOSE")
LOGGING = env_flag("PIPEWORK_LOGGING")

# Program lookup: <NAME>_PROG overrides, then these directories in order
PROG_ENV_SUFFIX = "_PROG"
SEARCH_DIRS = ("/usr/bin", "/sbin", "/usr/sbin", "/bin")

# Bytes per read when draining child output
READ_CHUNK = 65536
TEXT_ENCODING = "utf-8"
