from __future__ import annotations

"""
Pipeline Execution Context.

Bundles everything a stage needs from the outside world (validated
configuration, the diagnostic sink and the renderer) so it can be passed
explicitly instead of living in module-level state.
"""

from dataclasses import dataclass, field

from diskrank.core.rendering.base import SnapshotRenderer
from diskrank.core.services.diagnostics import DiagnosticSink
from diskrank.domain.config import ScanConfig


@dataclass
class PipelineContext:
    """
    Attributes:
        config: Validated run configuration.
        renderer: Destination for presenter output.
        diagnostics: Collector for branch-local traversal failures.
    """
    config: ScanConfig
    renderer: SnapshotRenderer
    diagnostics: DiagnosticSink = field(default_factory=DiagnosticSink)
