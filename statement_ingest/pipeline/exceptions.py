class PipelineError(Exception):
    """Base exception for pipeline orchestration errors."""


class StageTimeout(PipelineError):
    """Raised when a stage or the whole run exceeds its time budget."""

    def __init__(self, stage: str, timeout_seconds: float) -> None:
        super().__init__(f"Processing timed out after {timeout_seconds:g}s during {stage}")
        self.stage = stage
        self.timeout_seconds = timeout_seconds
