from __future__ import annotations

"""
Error Taxonomy.

Separates user-facing configuration failures, which abort the run before any
stage starts, from internal invariant violations, which indicate a programming
error and must never be silently tolerated. Per-branch traversal failures are
not exceptions; see `diskrank.domain.models.TraversalError`.
"""


class DiskRankError(Exception):
    """Base class for all application-raised exceptions."""


class ConfigurationError(DiskRankError):
    """Raised when the run configuration is missing or invalid."""


class PipelineInvariantError(DiskRankError):
    """Raised when a pipeline stage breaks its coordination contract."""


class ChannelClosedError(PipelineInvariantError):
    """Raised on a second close, or a put after close, of a channel sender."""
