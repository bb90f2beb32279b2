from __future__ import annotations

"""Project-wide constants used across modules."""

# Encoding used to read every source file.
DEFAULT_ENCODING: str = 'utf-8'

# Environment switches read by the CLI.
ENV_JSON_LOGS: str = 'AMALGAMATE_JSON_LOGS'
ENV_DEBUG: str = 'DEBUG'
