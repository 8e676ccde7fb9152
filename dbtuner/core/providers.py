"""Provider-agnostic interface for catalog metadata sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dbtuner.report.resultset import ResultSet


@dataclass(frozen=True)
class ServerInfo:
    """Identity of the profiled database, shown in the report header."""

    database_name: str
    server_name: str
    product_version: str
    product_major_version: int
    compat_level: int
    server_time: str


def _derive_provider_id_from_class_name(class_name: str) -> str:
    lowered = class_name.strip().lower()
    for suffix in ("metadataprovider", "provider"):
        if lowered.endswith(suffix):
            lowered = lowered[: -len(suffix)]
            break
    return lowered or "unknown"


class MetadataProvider(ABC):
    """Abstract interface for catalog metadata providers."""

    @abstractmethod
    def server_info(self) -> ServerInfo:
        """Return identity and version details of the target database."""

    @abstractmethod
    def fetch(self, section_key: str) -> ResultSet | None:
        """Materialize the result set for one report section.

        Args:
            section_key: Key of a section from the section catalog.

        Returns:
            The ordered result set, or ``None`` when the provider has nothing
            for that section.
        """

    def close(self) -> None:
        """Release any underlying resources."""

    def __enter__(self) -> MetadataProvider:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def provider_id(self) -> str:
        """Stable provider identifier used in logs and diagnostics."""
        explicit = getattr(self, "PROVIDER", "")
        if explicit:
            return str(explicit).strip().lower()
        return _derive_provider_id_from_class_name(self.__class__.__name__)


def get_metadata_provider(settings: Any) -> MetadataProvider:
    """Factory returning a connected provider for the configured target."""
    from dbtuner.core.database import apply_session_options, get_connection
    from dbtuner.core.sqlserver_provider import SqlServerMetadataProvider

    conn = get_connection(settings)
    try:
        apply_session_options(conn, lock_timeout_ms=settings.lock_timeout_ms)
        return SqlServerMetadataProvider(conn, safe_mode=settings.safe_mode)
    except Exception:
        conn.close()
        raise
