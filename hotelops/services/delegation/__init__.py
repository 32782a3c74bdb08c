from .delegation_service import DelegationService

__all__ = ["DelegationService"]
