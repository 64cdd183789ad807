"""Rule description pages and the few-shot exemplar."""

from src.rules.cache import PageCache, get_page_cache
from src.rules.example import EXEMPLAR, ExampleProvider
from src.rules.fetcher import RuleFetcher, identity_transform, proxy_url_transform
from src.rules.models import ExemplarRecord, RuleDescriptor

__all__ = [
    # Cache
    "PageCache",
    "get_page_cache",
    # Fetching
    "RuleFetcher",
    "identity_transform",
    "proxy_url_transform",
    # Exemplar
    "EXEMPLAR",
    "ExampleProvider",
    # Models
    "RuleDescriptor",
    "ExemplarRecord",
]
