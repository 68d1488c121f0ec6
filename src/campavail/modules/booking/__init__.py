from campavail.modules.booking.service import BookingRequest, BookingService

__all__ = ["BookingRequest", "BookingService"]
