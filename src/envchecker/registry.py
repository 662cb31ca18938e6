"""Registry of per-field environment metadata."""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import DuplicateRegistrationError


class EnvType(str, Enum):
    """Whether a value must be known at build time or may vary at runtime."""

    BUILD_TIME = "build-time"
    RUNTIME = "runtime"


class EnvMetadata(BaseModel):
    """Metadata attached to a single field, e.g. for docs or `.env.example` output."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    env_type: EnvType = Field(..., alias="envType")
    group: str


class EnvRegistry:
    """
    Side mapping from field name to EnvMetadata.

    The registry is independent of validation: a schema registers its fields
    here, and tooling (example generators, grouping) reads from it.
    """

    def __init__(self):
        self._entries: dict[str, EnvMetadata] = {}

    def register(self, name: str, metadata: EnvMetadata) -> EnvMetadata:
        """
        Associate metadata with a field name.

        Raises:
            DuplicateRegistrationError: If the name is already registered.
        """
        if name in self._entries:
            raise DuplicateRegistrationError(name)
        self._entries[name] = metadata
        return metadata

    def get(self, name: str, default: EnvMetadata | None = None) -> EnvMetadata | None:
        return self._entries.get(name, default)

    def __getitem__(self, name: str) -> EnvMetadata:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> list[tuple[str, EnvMetadata]]:
        return list(self._entries.items())

    def by_group(self) -> dict[str, list[str]]:
        """Field names keyed by group, in registration order."""
        groups: dict[str, list[str]] = {}
        for name, metadata in self._entries.items():
            groups.setdefault(metadata.group, []).append(name)
        return groups

    def by_env_type(self, env_type: EnvType) -> list[str]:
        return [
            name
            for name, metadata in self._entries.items()
            if metadata.env_type == env_type
        ]
