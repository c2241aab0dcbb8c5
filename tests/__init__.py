"""
Kakeibo Demo Test Suite

This package contains tests for the Kakeibo demo application:

- test_allocation.py: Allocation engine (income totals, conversion, validation)
- test_kakeibo.py: Page state reducers and session serialization
- test_kakeibo_routes.py: Kakeibo page, form actions and JSON endpoints
- test_users.py: Users API and bearer-token middleware
- test_google.py: Google OAuth flow, token file and spreadsheet creation
- test_security.py: CSRF protection on the page forms

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_allocation.py

Run with verbose output:
    pytest tests/ -v
"""
