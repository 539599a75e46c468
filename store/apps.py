from django.apps import AppConfig


class StoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "store"

    def ready(self):
        """
        Register signal handlers when the app is ready.
        Deleting a product drops the carts and wishlists it leaves empty.
        """
        import store.signals  # noqa
