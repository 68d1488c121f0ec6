from campavail.modules.notifications.sender import (
    BookingNotifier,
    NotificationSender,
    SMTPNotificationSender,
)

__all__ = ["BookingNotifier", "NotificationSender", "SMTPNotificationSender"]
