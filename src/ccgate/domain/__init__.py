"""Domain layer — rules, tickets, and the enforcement predicate.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
