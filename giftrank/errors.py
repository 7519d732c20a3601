"""
Error taxonomy for the ranking pipeline.

ProfileLoadFailure and CandidateRetrievalFailure are raised inside their stage
and recovered there (logged, degraded to cold start / empty candidates).
PipelineFailure is what escapes get_recommendations; InvalidArgument propagates as-is.
"""


class GiftRankError(Exception):
    """Base class for ranking pipeline errors."""


class InvalidArgument(GiftRankError, ValueError):
    """Caller passed an out-of-range argument (e.g. negative page)."""


class ProfileLoadFailure(GiftRankError):
    """Interaction history could not be loaded for a session."""


class CandidateRetrievalFailure(GiftRankError):
    """Vector or attribute query against the catalog failed."""


class PipelineFailure(GiftRankError):
    """Unrecovered error while producing a recommendation page."""
