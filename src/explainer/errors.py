"""
Stage failures. Any of these aborts the pipeline.
"""


class PipelineError(RuntimeError):
    """Base class for a failed pipeline stage."""


class GenerationFailure(PipelineError):
    """Voice-over script generation failed or returned nothing."""


class SynthesisFailure(PipelineError):
    """Speech synthesis failed or produced no audio."""


class TranscriptionFailure(PipelineError):
    """Narration transcription failed or returned no segments."""


class ReconciliationFailure(PipelineError):
    """Caption correction failed or returned nothing usable."""


class NoVideoAvailable(PipelineError):
    """No background video was given and the pool is empty."""


class RenderFailure(PipelineError):
    """ffmpeg failed while rendering the final video."""
