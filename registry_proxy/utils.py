"""Utility functions shared by the proxy pipeline and CLI."""

import json
from pathlib import Path
from typing import Any, Optional


# File system utilities
def ensure_dir(path: str) -> None:
    """Ensure directory exists, creating it if necessary."""
    Path(path).mkdir(parents=True, exist_ok=True)


def exists(path: str) -> bool:
    """Check if file exists."""
    return Path(path).exists()


def dirname(path: str) -> str:
    """Get directory name from path."""
    return str(Path(path).parent)


def expand_path(path: str) -> str:
    """Expand ~ and environment variables in path."""
    return str(Path(path).expanduser())


# File I/O
def read_text(path: str) -> str:
    """Read text file."""
    return Path(path).read_text()


def write_text(path: str, text: str) -> None:
    Path(path).write_text(text)


def read_json(path: str) -> Any:
    """Read JSON file."""
    with open(path) as f:
        return json.load(f)


def write_json(path: str, data: Any) -> None:
    """Write JSON file with pretty formatting."""
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def to_json(data: Any, indent: Optional[int] = 2) -> str:
    """Convert data to JSON string."""
    return json.dumps(data, indent=indent)


def first_present(*values: Optional[str]) -> Optional[str]:
    """Return the first non-empty value, or None."""
    for value in values:
        if value:
            return value
    return None


def mask_secret(secret: Optional[str]) -> str:
    """Mask all but the last four characters of a credential for display."""
    if not secret:
        return ""
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


# HTTP response helpers
def safe_json_response(response, context: str = "Registry request") -> Any:
    """
    Safely parse JSON from HTTP response with helpful error messages.

    Args:
        response: requests.Response object
        context: Description of what operation failed

    Returns:
        Parsed JSON

    Raises:
        ValueError: If response is not valid JSON, with diagnostic info
    """
    try:
        return response.json()
    except ValueError as e:
        content_type = response.headers.get("Content-Type", "unknown")

        # Preview response body (first 300 chars)
        body_preview = response.text[:300]
        if len(response.text) > 300:
            body_preview += "..."

        raise ValueError(
            f"{context} returned non-JSON response "
            f"(status {response.status_code}, Content-Type: {content_type}): {body_preview}"
        ) from e
