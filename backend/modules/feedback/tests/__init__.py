# backend/modules/feedback/tests/__init__.py

"""
Test suite for the feedback and reviews module.

This test suite provides comprehensive coverage for:
- Review management functionality
- Feedback collection and processing
- Sentiment analysis
- Content moderation
- Review aggregation and scoring
- API endpoints
- Analytics and reporting
- Notification system

Test Structure:
- Unit tests for individual services and utilities
- Integration tests for API endpoints
- End-to-end tests for complete workflows
- Performance tests for critical operations
- Security tests for data validation and access controls
"""

__version__ = "1.0.0"