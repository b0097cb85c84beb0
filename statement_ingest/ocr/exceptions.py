class OcrError(Exception):
    """Raised when rasterization or recognition fails."""
