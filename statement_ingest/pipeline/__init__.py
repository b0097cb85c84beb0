from statement_ingest.pipeline.models import PipelineMetadata, PipelineOptions, PipelineResult
from statement_ingest.pipeline.orchestrator import PipelineOrchestrator, build_orchestrator

__all__ = [
    "PipelineMetadata",
    "PipelineOptions",
    "PipelineOrchestrator",
    "PipelineResult",
    "build_orchestrator",
]
