"""Versioned JSON persistence of routines and logs in the key-value store.

Each collection is stored under its own key as

    {"schema_version": 1, "items": [...]}

A bare JSON list is the unversioned format written by the first release
of the app and is migrated on load.
"""

import json
import logging
from typing import Callable, Dict, List

from pydantic import ValidationError

from errors import StorageSchemaError
from kv_store import KeyValueStore
from session import clamp_rating
from typedefs import LogEntry, Routine

logger = logging.getLogger(__name__)

ROUTINES_KEY = "gymBuddy_workouts"
LOGS_KEY = "gymBuddy_logs"

SCHEMA_VERSION = 1

# Unversioned log field names and their current equivalents
LEGACY_LOG_FIELDS = {
    "workoutId": "routine_id",
    "workoutName": "routine_name",
    "duration": "duration_ms",
    "sessionData": "entries",
}


def migrate_routine_v0(item: dict) -> dict:
    return {
        "id": str(item.get("id", "")),
        "name": item.get("name", ""),
        "description": item.get("description") or None,
        "exercises": item.get("exercises") or [],
    }


def migrate_log_v0(item: dict) -> dict:
    migrated = {LEGACY_LOG_FIELDS.get(k, k): v for k, v in item.items()}
    migrated["id"] = str(migrated.get("id", ""))
    migrated["routine_id"] = str(migrated.get("routine_id", ""))
    migrated["duration_ms"] = max(0, int(migrated.get("duration_ms") or 0))
    migrated["rating"] = clamp_rating(migrated.get("rating") or 0)
    migrated["comment"] = migrated.get("comment") or None
    migrated["entries"] = migrated.get("entries") or {}
    migrated["exercises"] = migrated.get("exercises") or []
    return migrated


# Migrations from version N to N + 1, keyed by N
ROUTINE_MIGRATIONS: Dict[int, Callable[[dict], dict]] = {0: migrate_routine_v0}
LOG_MIGRATIONS: Dict[int, Callable[[dict], dict]] = {0: migrate_log_v0}


def decode_items(
    key: str, raw: str | None, migrations: Dict[int, Callable[[dict], dict]]
) -> List[dict]:
    """Decode a stored collection and bring it up to the current schema.

    Args:
        key: Store key, used in messages
        raw: Stored text, or None if the key is absent
        migrations: Per-item migrations keyed by source version

    Returns:
        List of item dicts in the current schema

    Raises:
        StorageSchemaError: If the text is not valid JSON, has an unexpected
            shape, or was written by a newer schema version
    """
    if raw is None:
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageSchemaError(f"{key} is not valid JSON: {e}") from e

    if isinstance(data, list):
        version, items = 0, data
    elif isinstance(data, dict) and isinstance(data.get("items"), list):
        version, items = data.get("schema_version", 0), data["items"]
    else:
        raise StorageSchemaError(f"{key} has an unrecognized layout")

    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise StorageSchemaError(
            f"{key} uses schema version {version}, "
            f"newer than supported version {SCHEMA_VERSION}"
        )

    if version < SCHEMA_VERSION:
        logger.info(
            "Migrating %d item(s) in %s from schema version %d to %d",
            len(items),
            key,
            version,
            SCHEMA_VERSION,
        )
    while version < SCHEMA_VERSION:
        try:
            items = [migrations[version](item) for item in items]
        except (AttributeError, TypeError, ValueError) as e:
            raise StorageSchemaError(
                f"{key} could not be migrated from schema version {version}: {e}"
            ) from e
        version += 1

    return items


def encode_items(items: List[dict]) -> str:
    return json.dumps({"schema_version": SCHEMA_VERSION, "items": items})


class Storage:
    """Loads and saves the two persisted collections."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load_routines(self) -> List[Routine]:
        items = decode_items(ROUTINES_KEY, self.kv.get(ROUTINES_KEY), ROUTINE_MIGRATIONS)
        try:
            return [Routine.model_validate(item) for item in items]
        except ValidationError as e:
            raise StorageSchemaError(f"{ROUTINES_KEY} contains invalid routines: {e}") from e

    def load_logs(self) -> List[LogEntry]:
        items = decode_items(LOGS_KEY, self.kv.get(LOGS_KEY), LOG_MIGRATIONS)
        try:
            return [LogEntry.model_validate(item) for item in items]
        except ValidationError as e:
            raise StorageSchemaError(f"{LOGS_KEY} contains invalid logs: {e}") from e

    def save_routines(self, routines: List[Routine]) -> None:
        self.kv.set(ROUTINES_KEY, encode_items([r.model_dump(mode="json") for r in routines]))

    def save_logs(self, logs: List[LogEntry]) -> None:
        self.kv.set(LOGS_KEY, encode_items([log.model_dump(mode="json") for log in logs]))
