# backend/modules/feedback/__init__.py

"""
Customer Feedback Module

Anonymous feedback reached through a business QR code:
- Public submission with per-IP abuse control
- Rating sentiment and critical keyword detection
- Owner-side management (view, respond, status, hide)
- Admin moderation (replies, soft deletion, restore)
- Public and owner statistics

Every accepted submission is routed to the notifications module.
"""
