"""API Resilience Implementations.

Contains the sliding-window rate limiter and the retry policy that decides,
per attempt, whether to succeed, retry after a delay, or fail.
Bounded Context: API Resilience
"""
