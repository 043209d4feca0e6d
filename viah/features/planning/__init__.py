"""
Wedding planning records: weddings and their events.
"""
