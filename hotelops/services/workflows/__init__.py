"""
Approval workflow services.

`status_transitions` is a plain module of table lookups; import it directly.
"""
