# backend/modules/businesses/__init__.py

"""
Business Directory Module

Registered businesses (the feedback-collecting tenants) and the account
events that concern their owners:
- Lookup by public code (the code embedded in a business QR code)
- Account block / unblock
- Password change audit notifications
"""
