"""Schema-stamped JSON output for CLI commands.

Every ``--json`` payload carries ``schema_id``, ``schema_version``,
``producer`` and ``produced_at`` so downstream tooling can tell outputs
apart and detect format changes.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from macsign import __version__


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "identities").
        schema_version: Integer version for backward compatibility.
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.

    Example:
        >>> json_response("identities", 1, identities=[])
        {
          "schema_id": "identities",
          "schema_version": 1,
          "producer": "macsign-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "identities": []
        }
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": f"macsign-{__version__}",
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)
