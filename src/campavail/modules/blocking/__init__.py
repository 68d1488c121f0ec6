from campavail.modules.blocking.service import DateBlockingService

__all__ = ["DateBlockingService"]
