"""Error definitions for tifgen."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_UNKNOWN_FORMAT = "E_UNKNOWN_FORMAT"
E_UNKNOWN_VARIANT = "E_UNKNOWN_VARIANT"
E_JOB_FIELD = "E_JOB_FIELD"
E_DIMENSIONS = "E_DIMENSIONS"
E_ODD_DIMENSIONS = "E_ODD_DIMENSIONS"
E_CODEC = "E_CODEC"
E_WRITE_IO = "E_WRITE_IO"
E_SOURCE_NOT_FOUND = "E_SOURCE_NOT_FOUND"
E_SOURCE_UNSUPPORTED = "E_SOURCE_UNSUPPORTED"
E_LAYOUT = "E_LAYOUT"
E_INSPECT = "E_INSPECT"


@dataclass
class TifError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class ConfigurationError(TifError):
    pass


class GeometryError(TifError):
    pass


class CodecError(TifError):
    pass


class WriteError(TifError):
    pass


class SourceImageError(TifError):
    pass


class LayoutError(TifError):
    pass


class InspectError(TifError):
    pass


def config_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigurationError:
    return ConfigurationError(code=code, message=message, context=context)


def layout_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> LayoutError:
    return LayoutError(code=E_LAYOUT, message=message, context=context)


__all__ = [
    "TifError",
    "ConfigurationError",
    "GeometryError",
    "CodecError",
    "WriteError",
    "SourceImageError",
    "LayoutError",
    "InspectError",
    "config_error",
    "layout_error",
    "E_UNKNOWN_FORMAT",
    "E_UNKNOWN_VARIANT",
    "E_JOB_FIELD",
    "E_DIMENSIONS",
    "E_ODD_DIMENSIONS",
    "E_CODEC",
    "E_WRITE_IO",
    "E_SOURCE_NOT_FOUND",
    "E_SOURCE_UNSUPPORTED",
    "E_LAYOUT",
    "E_INSPECT",
]
