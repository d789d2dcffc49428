"""
Comprehensive test suite for Nicotine Tracker application.

This package contains all test types:
- Unit tests
- Integration tests
- API endpoint tests
- Database migration tests
- Regression tests
- Snapshot tests
- Performance tests
- Security tests
- Property-based tests
- Accessibility tests
"""
