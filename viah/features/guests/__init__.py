"""
Guest list: households (invitation units) and the guests in them.
"""
