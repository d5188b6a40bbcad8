# app/core/enhancement/domain.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ============================================================================
# ENUMS
# ============================================================================

class ErrorKind(str, Enum):
    """Stable failure classification exposed by the enhancement pipeline."""
    MISSING_URL = "missing_url"
    INVALID_URL = "invalid_url"
    UNREACHABLE_RESOURCE = "unreachable_resource"
    NOT_AN_IMAGE = "not_an_image"
    PROVIDER_FAILURE = "provider_failure"
    INVALID_PROVIDER_RESULT = "invalid_provider_result"
    INTERNAL_FAULT = "internal_fault"


class ValidationMode(str, Enum):
    """
    How much checking happens before the provider is called.

    BASIC  - syntactic URL validation only
    STRICT - also probes the source URL for reachability and an image/* type,
             and reports original_url back to the caller
    """
    BASIC = "basic"
    STRICT = "strict"


# ============================================================================
# VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class EnhancementRequest:
    source_url: str


@dataclass(frozen=True)
class EnhancementResult:
    original_url: str
    enhanced_url: str
    size_label: str


@dataclass(frozen=True)
class HeadProbe:
    """Outcome of an accepted header-only request."""
    url: str
    status: int
    content_type: Optional[str] = None
    content_length: int = 0


# ============================================================================
# FAILURES
# ============================================================================

class PipelineFailure(Exception):
    """
    Classified failure of an enhancement run.

    ``message`` is safe to show to callers. ``cause`` carries diagnostic
    detail (e.g. the provider's own error text) and is only logged.
    """

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __repr__(self) -> str:
        return f"PipelineFailure(kind={self.kind.value!r}, message={self.message!r})"


class ProbeError(Exception):
    """A header-only probe did not produce an acceptable response."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
