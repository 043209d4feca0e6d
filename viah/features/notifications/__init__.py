"""
Header notifications for couples, built from unread vendor messages.
"""
