"""
Couple/vendor messaging: derived conversation ids, inbox grouping,
the open -> closed conversation state machine and live updates.
"""
