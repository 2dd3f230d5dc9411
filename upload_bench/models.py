"""Data models for the upload benchmark."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class ScenarioKind(Enum):
    """Category of a benchmark scenario."""

    PRESIGN_PUT = "get-traditional-presigned-url"
    INITIATE_MULTIPART = "initiate-multipart-only"
    PRESIGN_PART = "get-multipart-presigned-url-only"
    TRADITIONAL_UPLOAD = "traditional-upload"
    MULTIPART_TOTAL = "upload-multipart-total"
    MULTIPART_UPLOAD = "upload-multipart-upload"
    MULTIPART_COMPLETE = "upload-multipart-complete"


MICRO_KINDS = (
    ScenarioKind.PRESIGN_PUT,
    ScenarioKind.INITIATE_MULTIPART,
    ScenarioKind.PRESIGN_PART,
)

@dataclass(frozen=True)
class ScenarioId:
    """Typed identifier of a measurement bucket.

    The display name doubles as the key in the measurement store.
    """

    kind: ScenarioKind
    size: Optional[str] = None
    chunk: Optional[str] = None

    def __post_init__(self):
        if self.kind in MICRO_KINDS:
            if self.size is not None or self.chunk is not None:
                raise ValueError(f"{self.kind.value} takes no size or chunk")
        elif self.kind == ScenarioKind.TRADITIONAL_UPLOAD:
            if self.size is None or self.chunk is not None:
                raise ValueError("traditional-upload takes a size and no chunk")
        elif self.size is None or self.chunk is None:
            raise ValueError(f"{self.kind.value} takes a size and a chunk")

    @property
    def name(self) -> str:
        """Display name, e.g. ``upload-multipart-total-10m-5m``."""
        parts = [self.kind.value]
        if self.size is not None:
            parts.append(self.size)
        if self.chunk is not None:
            parts.append(self.chunk)
        return "-".join(parts)

    def with_kind(self, kind: ScenarioKind) -> "ScenarioId":
        """Return the sibling id of another kind with the same size/chunk."""
        return ScenarioId(kind, self.size, self.chunk)

    @classmethod
    def parse(cls, name: str) -> Optional["ScenarioId"]:
        """Inverse of ``name``. Returns None for names this tool never writes."""
        for kind in ScenarioKind:
            if name == kind.value:
                try:
                    return cls(kind)
                except ValueError:
                    return None
            prefix = kind.value + "-"
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):].split("-")
            try:
                if len(rest) == 1:
                    return cls(kind, rest[0])
                if len(rest) == 2:
                    return cls(kind, rest[0], rest[1])
            except ValueError:
                return None
        return None

    def __str__(self) -> str:
        return self.name


@dataclass
class Scenario:
    """One independently measured benchmark case."""

    id: ScenarioId
    action: Callable[[Any], Any]
    budget_ms: int
    setup: Optional[Callable[[], Any]] = None
    size_bytes: Optional[int] = None
    chunk_bytes: Optional[int] = None

    @property
    def name(self) -> str:
        return self.id.name


@dataclass
class StorageConfig:
    """Connection settings for the S3-compatible endpoint."""

    endpoint_url: str
    aws_access_key_id: str
    aws_secret_access_key: str
    region_name: str = "us-east-1"
    addressing_style: str = "path"
    presign_expiry: int = 3600


@dataclass
class UploadSession:
    """State of one in-flight multipart upload."""

    upload_id: str
    key: str
    etags: list[str] = field(default_factory=list)

    def parts(self) -> list[dict]:
        """Parts list for CompleteMultipartUpload, numbered from 1."""
        return [
            {"PartNumber": number, "ETag": etag}
            for number, etag in enumerate(self.etags, start=1)
        ]
