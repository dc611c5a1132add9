"""
complink Test Suite

Function-style tests for the ambient layers. Engine behaviour is covered by
the unittest classes in the top-level tests/ directory.

Test Modules:
- test_app.py: Configuration and application state
- test_utils.py: Logging helpers

Run all tests:
    pytest complink/tests/ tests/ -v

Run individual test:
    pytest complink/tests/test_app.py::test_exporter_config -v
"""

__all__ = [
    # App tests
    "test_exporter_config",
    "test_config_env_overrides",
    "test_exporter_state_creation",

    # Utility tests
    "test_formatter",
    "test_logging_helpers",
    "test_expected_error_has_no_traceback",
]
