from unittest import mock

from django.apps import apps
from django.contrib.auth import get_user_model
from django.test import TestCase

from users.apps import create_superadmin

ENV = {
    'DJANGO_SUPERUSER_USERNAME': 'ops',
    'DJANGO_SUPERUSER_EMAIL': 'ops@example.com',
    'DJANGO_SUPERUSER_PASSWORD': 'ops-pass-123',
}


class CreateSuperadminTests(TestCase):
    def run_hook(self):
        with mock.patch.dict('os.environ', ENV):
            create_superadmin(sender=apps.get_app_config('users'))

    def test_creates_admin(self):
        with self.assertLogs('users.apps', level='INFO'):
            self.run_hook()

        user = get_user_model().objects.get(email='ops@example.com')
        self.assertTrue(user.is_superuser)
        self.assertEqual(user.role, 'admin')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password('ops-pass-123'))

    def test_runs_once(self):
        self.run_hook()
        self.run_hook()
        self.assertEqual(get_user_model().objects.filter(email='ops@example.com').count(), 1)

    def test_hook_connected_only_when_enabled(self):
        config = apps.get_app_config('users')
        with mock.patch('users.apps.post_migrate') as post_migrate:
            with mock.patch.dict('os.environ', {'CREATE_SUPERADMIN': 'False'}):
                config.ready()
            post_migrate.connect.assert_not_called()

            with mock.patch.dict('os.environ', {'CREATE_SUPERADMIN': 'True'}):
                config.ready()
            post_migrate.connect.assert_called_once_with(create_superadmin, sender=config)

    def test_skipped_without_password(self):
        env = dict(ENV, DJANGO_SUPERUSER_PASSWORD='')
        with mock.patch.dict('os.environ', env):
            with self.assertLogs('users.apps', level='WARNING'):
                create_superadmin(sender=apps.get_app_config('users'))
        self.assertFalse(get_user_model().objects.filter(email='ops@example.com').exists())
