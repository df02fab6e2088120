"""
Test suite for the IndiaMART Product Agent.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_queue_runner_service.py -v
"""
