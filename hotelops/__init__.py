"""
Approval and escalation core for the hotel operations intranet.
"""

__version__ = "1.0.0"
