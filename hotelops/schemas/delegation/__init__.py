from .delegation import DelegationCreate, DelegationResponse

__all__ = ["DelegationCreate", "DelegationResponse"]
