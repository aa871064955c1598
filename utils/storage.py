import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from settings import KEYRING_SERVICE

logger = logging.getLogger(__name__)


class PasswordStore:
    """Okta password storage in the system keyring

    Keyring failures are logged and treated as a missing password, so a
    locked or absent keyring backend only means the operator is prompted.
    """

    def __init__(self, service: Optional[str] = None):
        self.service = service or KEYRING_SERVICE

    def get(self, username: str) -> Optional[str]:
        """Get the stored password for a username, or None"""
        try:
            return keyring.get_password(self.service, username)
        except KeyringError as e:
            logger.debug(f"Unable to read password from keyring: {e}")
            return None

    def set(self, username: str, password: str) -> bool:
        """Store the password for a username

        Returns:
            True if the password was saved
        """
        try:
            keyring.set_password(self.service, username, password)
            return True
        except KeyringError as e:
            logger.warning(f"Unable to save password to keyring: {e}")
            return False

    def delete(self, username: str) -> bool:
        """Remove the stored password

        Returns:
            True if a password was removed
        """
        try:
            keyring.delete_password(self.service, username)
            return True
        except PasswordDeleteError:
            logger.debug(f"No password stored in keyring for {username}")
            return False
        except KeyringError as e:
            logger.warning(f"Unable to delete password from keyring: {e}")
            return False
