"""Image transfer pipeline for stored documents.

This package wires extraction, filtering, resolution, transfer and rewriting
into single-document operations and folder-wide batches.
"""

from .context import RelayContext
from .image_pipeline import ImagePipeline
from .batch_orchestrator import BatchOrchestrator
from .models import BatchSummary, CollectedImages, DocumentOutcome
from .errors import PipelineError, DocumentContextChangedError, NotAnImageError

__all__ = [
    'RelayContext',
    'ImagePipeline',
    'BatchOrchestrator',
    'BatchSummary',
    'CollectedImages',
    'DocumentOutcome',
    'PipelineError',
    'DocumentContextChangedError',
    'NotAnImageError',
]
