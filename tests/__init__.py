"""
Test suite for the Users API.

This package contains:
- unit/: model, bootstrap, error classification, config, server lifecycle
  and load-test logic tests
- integration/: REST API tests through the Flask test client
- smoke/: HTTP checks against a running server
- performance/: the Locust load test (run with the ``locust`` CLI)
"""
