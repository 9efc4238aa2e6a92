"""
Test suite for the pipeline monitor.

Provides:
- Derivation unit tests (stages, coverage, errors, history, job views)
- Data source and poller tests
- HTTP API tests
"""
