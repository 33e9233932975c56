# backend/modules/notifications/__init__.py

"""
Notifications Module

In-app alerts addressed to business owners:
- Routing of feedback, moderation and account events to notification types
- Icon mapping for every notification type
- Read state, deletion and paginated listing
- Manual and broadcast notifications sent by admins
"""
