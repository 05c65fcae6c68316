"""Retry policy with exponential backoff and jitter."""

import random
from typing import Iterable, Optional


def calculate_backoff_delay(
    attempt: int,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    jitter_max: float = 0.5
) -> float:
    """
    Calculate exponential backoff delay with jitter.
    
    Formula: min(max_delay, (base_delay * (2 ** attempt)) + random_jitter)
    
    Args:
        attempt: Retry attempt number (0-indexed)
        base_delay: Base delay in seconds
        max_delay: Maximum delay cap in seconds
        jitter_max: Maximum jitter to add in seconds
        
    Returns:
        Delay in seconds
    """
    exponential_delay = base_delay * (2 ** attempt)
    jitter = random.uniform(0, jitter_max)
    return min(max_delay, exponential_delay + jitter)


class RetryPolicy:
    """
    Decides whether a failed acquisition is worth another attempt.
    
    Retries on timeouts and on 429, 502, 503, 504 by default.
    """
    
    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 4.0,
        jitter_max: float = 0.5,
        retryable_status_codes: Optional[Iterable[int]] = None
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter_max = jitter_max
        self.retryable_status_codes = frozenset(
            retryable_status_codes or (429, 502, 503, 504)
        )
    
    def is_retryable(
        self,
        status_code: Optional[int] = None,
        is_timeout: bool = False
    ) -> bool:
        if is_timeout:
            return True
        return status_code in self.retryable_status_codes
    
    def should_retry(self, attempt: int, status_code: Optional[int] = None, is_timeout: bool = False) -> bool:
        """True if attempt (0-indexed) failed retryably and attempts remain."""
        return attempt < self.max_retries - 1 and self.is_retryable(status_code, is_timeout)
    
    def delay(self, attempt: int) -> float:
        return calculate_backoff_delay(attempt, self.base_delay, self.max_delay, self.jitter_max)
