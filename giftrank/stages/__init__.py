"""Pipeline stages: preferences, candidates, scoring, niche boost, diversity, pagination."""

from .candidate_retriever import retrieve_candidates
from .diversity import apply_diversity_and_novelty
from .niche_booster import apply_niche_boost
from .niche_profiles import build_niche_profiles, get_niche_profiles
from .orchestrator import run_pipeline
from .paginator import paginate
from .preference_loader import build_preferences, load_user_preferences
from .scoring import score_candidates

__all__ = [
    "apply_diversity_and_novelty",
    "apply_niche_boost",
    "build_niche_profiles",
    "build_preferences",
    "get_niche_profiles",
    "load_user_preferences",
    "paginate",
    "retrieve_candidates",
    "run_pipeline",
    "score_candidates",
]
