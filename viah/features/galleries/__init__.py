"""
Photo gallery records: wedding inspiration boards, event albums and vendor portfolios.
"""
