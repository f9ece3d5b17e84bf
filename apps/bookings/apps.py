from django.apps import AppConfig, apps


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import MessageBus

        from .application.handlers import register_booking_handlers
        from .application.workflow import BookingWorkflow
        from .repositories import BookingRepository
        from .services import AvailabilityStore

        campaigns = apps.get_app_config("campaigns")

        self.store = AvailabilityStore()
        self.bus = register_booking_handlers(MessageBus(), campaigns.broadcaster)
        self.workflow = BookingWorkflow(
            store=self.store,
            repository=BookingRepository(),
            cache=campaigns.cache,
            bus=self.bus,
        )
