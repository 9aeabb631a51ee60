"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in probe code.

Each top-level class corresponds to one file in config/settings/:
    ProbeSchema    → probe.yaml
    LoggingSchema  → logging.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# probe.yaml
# =============================================================================


class ExitCodesSchema(_StrictBase):
    ok: int = Field(ge=0, le=255)
    critical: int = Field(ge=0, le=255)
    unknown: int = Field(ge=0, le=255)


class ConnectionSchema(_StrictBase):
    timeout_seconds: float = Field(gt=0)
    check_period_seconds: float = Field(gt=0)
    verify_tls: bool


class ProbeSchema(_StrictBase):
    name: str
    version: str
    exit_codes: ExitCodesSchema
    connection: ConnectionSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool
    stream: Literal["stdout", "stderr"]


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: Literal["console", "json"]
    handlers: HandlersSchema
