from django.apps import AppConfig
from django.conf import settings


class CampaignsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.campaigns"
    verbose_name = "Campaigns"

    def ready(self) -> None:
        from shared.application.broadcaster import ChangeBroadcaster

        from .cache import CacheLayer

        self.cache = CacheLayer()
        self.broadcaster = ChangeBroadcaster(
            queue_size=getattr(settings, "BROADCAST_QUEUE_SIZE", 100)
        )
