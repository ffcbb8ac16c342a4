"""
Data I/O utilities.

Provides thin helpers to:
- Load/save the saved plan (config, selected days, window) as local JSON
- Load/save the same snapshot to Azure Blob Storage
- Sync a local snapshot to Azure Blob

The snapshot only ever contains plain JSON data:

    {"config": {...}, "selectedDates": ["2026-03-02", ...], "timelineMonths": 6}

Dependencies:
- Standard library only for local JSON.
- For Azure Blob: `azure-storage-blob` package is required.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .calendar_utils import to_iso
from .config import Config, get_config
from .holidays import catalog_for_config
from .planner import normalize_selected_dates
from .schema import PTOConfig
from .timeline import normalize_window_months

try:
    from azure.storage.blob import BlobServiceClient  # type: ignore[import]
except ImportError:  # pragma: no cover - optional dependency
    BlobServiceClient = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class PlanState:
    """Everything the user edits: configuration, selection and window size."""

    config: PTOConfig = field(default_factory=PTOConfig)
    selected_dates: List[date] = field(default_factory=list)
    timeline_months: int = 6

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PlanState":
        """
        Rebuild a state from a snapshot, coercing anything unusable.

        Bad config fields fall back per PTOConfig.from_dict; bad, weekend
        and holiday selections are dropped; an unknown window becomes 6.
        """
        config = PTOConfig.from_dict(raw.get("config"))
        selected = raw.get("selectedDates") or []
        if not isinstance(selected, list):
            logger.warning("Ignoring non-list selectedDates: %r", selected)
            selected = []
        return cls(
            config=config,
            selected_dates=normalize_selected_dates(selected, catalog_for_config(config)),
            timeline_months=normalize_window_months(raw.get("timelineMonths", 6)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "selectedDates": [to_iso(d) for d in sorted(set(self.selected_dates))],
            "timelineMonths": self.timeline_months,
        }


def _parse_state(text: str, source: str) -> Optional[PlanState]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to load state from %s: %s", source, e)
        return None
    if not isinstance(raw, dict):
        logger.error("Failed to load state from %s: expected a JSON object", source)
        return None
    return PlanState.from_dict(raw)


# --- Local JSON helpers ----------------------------------------------------


def load_state(path: Optional[PathLike] = None) -> Optional[PlanState]:
    """
    Load the saved plan from a JSON file.

    Returns None when the file does not exist or can not be parsed, so
    callers can fall back to defaults.
    """
    path = Path(path) if path is not None else get_config().state_path
    if not path.exists():
        return None
    return _parse_state(path.read_text(encoding="utf-8"), str(path))


def save_state(state: PlanState, path: Optional[PathLike] = None) -> Path:
    """Write the plan as JSON, creating parent directories. Overwrites."""
    path = Path(path) if path is not None else get_config().state_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
    return path


# --- Azure Blob helpers ----------------------------------------------------


def _get_blob_service(config: Optional[Config] = None):
    if BlobServiceClient is None:
        raise ImportError(
            "azure-storage-blob is required for Azure Blob operations. "
            "Install via `pip install azure-storage-blob`."
        )
    cfg = config or get_config()
    if not cfg.azure_blob_connection_string:
        raise ValueError(
            "Azure blob connection string is not configured. "
            "Set PTO_AZURE_BLOB_CONNECTION_STRING or pass Config explicitly."
        )
    return BlobServiceClient.from_connection_string(
        cfg.azure_blob_connection_string
    ), cfg


def _blob_client(
    blob_name: Optional[str],
    container_name: Optional[str],
    config: Optional[Config],
):
    service_client, cfg = _get_blob_service(config)
    container = container_name or cfg.azure_blob_container_name
    if not container:
        raise ValueError(
            "Azure blob container name is not configured. "
            "Set PTO_AZURE_BLOB_CONTAINER_NAME or pass container_name."
        )
    return service_client.get_blob_client(
        container=container, blob=blob_name or cfg.azure_blob_name
    )


def load_state_from_azure_blob(
    blob_name: Optional[str] = None,
    *,
    container_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> Optional[PlanState]:
    """
    Load the saved plan from a JSON blob.

    - blob_name: overrides Config.azure_blob_name if provided
    - container_name: overrides Config.azure_blob_container_name if provided
    """
    blob_client = _blob_client(blob_name, container_name, config)
    if not blob_client.exists():
        return None
    text = blob_client.download_blob().readall().decode("utf-8")
    return _parse_state(text, f"blob {blob_client.blob_name}")


def save_state_to_azure_blob(
    state: PlanState,
    blob_name: Optional[str] = None,
    *,
    container_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> None:
    """
    Save the plan as JSON into an Azure Blob.

    Overwrites the target blob.
    """
    blob_client = _blob_client(blob_name, container_name, config)
    payload = json.dumps(state.to_dict(), indent=2).encode("utf-8")
    blob_client.upload_blob(payload, overwrite=True)


def sync_state_to_azure_blob(
    local_path: Optional[PathLike] = None,
    blob_name: Optional[str] = None,
    *,
    container_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> bool:
    """
    Convenience function:

    1) Load the plan from the local JSON file.
    2) Push it to Azure Blob Storage.

    Returns False when there is no local plan to push.
    """
    state = load_state(local_path)
    if state is None:
        return False
    save_state_to_azure_blob(
        state,
        blob_name=blob_name,
        container_name=container_name,
        config=config,
    )
    return True
