# app/core/enhancement/__init__.py
"""
Enhancement core -- provider-agnostic request pipeline.

This package contains the domain values, the abstract collaborators
(ports), URL validation, provider invocation and the composed
use-case (EnhancementPipeline).

Canonical imports:
    from app.core.enhancement import EnhancementPipeline
    from app.core.enhancement.domain import ErrorKind, PipelineFailure
    from app.core.enhancement.ports import EnhancementProvider
"""
from app.core.enhancement.domain import (  # noqa: F401
    ErrorKind,
    ValidationMode,
    EnhancementRequest,
    EnhancementResult,
    HeadProbe,
    PipelineFailure,
    ProbeError,
)
from app.core.enhancement.ports import EnhancementProvider, ResourceProber  # noqa: F401
from app.core.enhancement.url_validator import is_valid_url  # noqa: F401
from app.core.enhancement.invoker import EnhancementInvoker  # noqa: F401
from app.core.enhancement.pipeline import EnhancementPipeline  # noqa: F401
