import unittest
from unittest.mock import patch

from keyring.errors import KeyringError, PasswordDeleteError

from utils.storage import PasswordStore


@patch("utils.storage.keyring")
class TestPasswordStore(unittest.TestCase):
    def setUp(self):
        self.store = PasswordStore(service="gsc-test")

    def test_get(self, keyring_mock):
        keyring_mock.get_password.return_value = "hunter2"

        self.assertEqual(self.store.get("jane@example.com"), "hunter2")
        keyring_mock.get_password.assert_called_once_with("gsc-test", "jane@example.com")

    def test_get_keyring_failure_is_a_miss(self, keyring_mock):
        keyring_mock.get_password.side_effect = KeyringError("locked")
        self.assertIsNone(self.store.get("jane@example.com"))

    def test_set(self, keyring_mock):
        self.assertTrue(self.store.set("jane@example.com", "hunter2"))
        keyring_mock.set_password.assert_called_once_with("gsc-test", "jane@example.com", "hunter2")

    def test_set_failure(self, keyring_mock):
        keyring_mock.set_password.side_effect = KeyringError("no backend")
        self.assertFalse(self.store.set("jane@example.com", "hunter2"))

    def test_delete(self, keyring_mock):
        self.assertTrue(self.store.delete("jane@example.com"))
        keyring_mock.delete_password.assert_called_once_with("gsc-test", "jane@example.com")

    def test_delete_missing(self, keyring_mock):
        keyring_mock.delete_password.side_effect = PasswordDeleteError("not found")
        self.assertFalse(self.store.delete("jane@example.com"))

    def test_default_service(self, keyring_mock):
        self.assertEqual(PasswordStore().service, "gimme-snowflake-creds")
