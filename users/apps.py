import logging
import os

from django.apps import AppConfig
from django.db.models.signals import post_migrate

logger = logging.getLogger(__name__)


def create_superadmin(sender, **kwargs):
    """Bootstrap the back-office admin that manages coupons and order payments."""
    from django.contrib.auth import get_user_model
    User = get_user_model()

    email = os.getenv("DJANGO_SUPERUSER_EMAIL", "superadmin@example.com")
    password = os.getenv("DJANGO_SUPERUSER_PASSWORD")
    if not password:
        logger.warning("DJANGO_SUPERUSER_PASSWORD is not set, superadmin %s not created.", email)
        return

    if User.objects.filter(email=email).exists():
        return
    User.objects.create_superuser(
        username=os.getenv("DJANGO_SUPERUSER_USERNAME", "superadmin"),
        email=email,
        password=password,
        role="admin",
        isEmailVerified=True,
    )
    logger.info("Default superadmin %s created.", email)


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "users"

    def ready(self):
        if os.getenv("CREATE_SUPERADMIN") == "True":
            post_migrate.connect(create_superadmin, sender=self)
