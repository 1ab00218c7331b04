"""FastAPI dependency injection for shared services.

The scoring policy is loaded once (from ``settings.scoring_policy_path``, or
the built-in defaults) and shared by every request, so a malformed policy
file surfaces on the first request instead of silently changing scores
between requests.

Key Components:
    - get_scoring_policy(): Singleton factory for the active ScoringPolicy
    - PolicyDep: Type alias for cleaner endpoint signatures
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from .config import get_settings
from .evaluation.policy import ScoringPolicy, load_scoring_policy


@lru_cache()
def get_scoring_policy() -> ScoringPolicy:
    """Get or load the shared scoring policy.

    Returns:
        ScoringPolicy from the configured JSON file, or DEFAULT_POLICY

    Raises:
        ScoringPolicyError: If the configured file is unreadable or invalid
    """
    return load_scoring_policy(get_settings().scoring_policy_path)


# Type alias for dependency injection
PolicyDep = Annotated[ScoringPolicy, Depends(get_scoring_policy)]
