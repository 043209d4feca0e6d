"""
Calendar provider authorization (Google and Outlook).
"""
