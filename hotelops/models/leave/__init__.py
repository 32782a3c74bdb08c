from .leave_request import LeaveRequest

__all__ = ["LeaveRequest"]
