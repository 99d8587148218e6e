"""Resilience – circuit breaking for remediated services."""
