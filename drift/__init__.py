# ABOUTME: Drift schedule pipeline package (prompting, RAG lookup, model backends, output repair, progress).
# ABOUTME: Use generate_schedule() from drift.pipeline for API integration.

from drift.pipeline import generate_schedule

__all__ = ["generate_schedule"]
