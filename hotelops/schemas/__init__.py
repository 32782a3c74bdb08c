"""
Pydantic schemas for results returned by the workflow services.
"""
