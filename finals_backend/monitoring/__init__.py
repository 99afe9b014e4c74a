"""
System monitoring and health check modules.
"""

from .monitoring import MonitoringService, SystemStatus

__all__ = ['MonitoringService', 'SystemStatus']
