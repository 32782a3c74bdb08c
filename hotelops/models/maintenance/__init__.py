from .maintenance_ticket import MaintenanceTicket

__all__ = ["MaintenanceTicket"]
