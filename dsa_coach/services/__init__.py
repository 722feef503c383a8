from dsa_coach.services.cache import CacheService
from dsa_coach.services.catalog import LeetCodeCatalog
from dsa_coach.services.coach import CoachPipeline
from dsa_coach.services.context import ProblemContext, ProblemContextResolver
from dsa_coach.services.history import ChatHistoryStore
from dsa_coach.services.providers import ProviderDispatcher, SamplingOptions

__all__ = [
    "CacheService",
    "LeetCodeCatalog",
    "CoachPipeline",
    "ProblemContext",
    "ProblemContextResolver",
    "ChatHistoryStore",
    "ProviderDispatcher",
    "SamplingOptions",
]
