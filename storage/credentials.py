"""Credential vault stored in the credentials sheet"""

import logging
from typing import List, Optional

from errors import StoreUnavailable
from oauth.models import TokenPair
from settings import CREDENTIALS_SHEET
from .backends import Rows, TabularBackend
from .models import CREDENTIAL_HEADER, Credential

logger = logging.getLogger(__name__)


class CredentialStore:
    """Reads and writes per-user credential rows keyed by user id

    Row 0 of the sheet is the header ``user_id, user_name, token,
    refresh_token``.
    """

    def __init__(self, backend: TabularBackend, sheet_name: str = CREDENTIALS_SHEET):
        self.backend = backend
        self.sheet_name = sheet_name

    def _rows(self) -> Rows:
        rows = self.backend.read_rows(self.sheet_name)
        if rows is None:
            raise StoreUnavailable(self.sheet_name)
        return rows

    def _find_index(self, rows: Rows, user_id: str) -> Optional[int]:
        for index, row in enumerate(rows[1:], start=1):
            if row and str(row[0]).strip() == user_id:
                return index
        return None

    def get_credentials(self, user_id: Optional[str] = None) -> List[Credential]:
        """Return stored credentials, optionally only those of ``user_id``

        Raises:
            StoreUnavailable: If the credentials sheet does not exist
        """
        credentials = [
            Credential.from_row(row) for row in self._rows()[1:]
            if row and str(row[0]).strip()
        ]
        if user_id is not None:
            return [c for c in credentials if c.user_id == user_id]
        return credentials

    def get_credential(self, user_id: str) -> Optional[Credential]:
        """Return the credential of ``user_id`` or None"""
        matches = self.get_credentials(user_id)
        return matches[0] if matches else None

    def upsert_credentials(self, credential: Credential) -> None:
        """Update the row of ``credential.user_id`` or append a new one

        Creates the credentials sheet on first use.
        """
        with self.backend.lock:
            if self.backend.read_rows(self.sheet_name) is None:
                self.backend.create_sheet(self.sheet_name, [list(CREDENTIAL_HEADER)])
                logger.info(f"Created credentials sheet '{self.sheet_name}'")

            index = self._find_index(self._rows(), credential.user_id)
            if index is not None:
                self.backend.update_row(self.sheet_name, index, credential.to_row())
                logger.info(f"Updated credentials for user {credential.user_name}")
            else:
                self.backend.append_row(self.sheet_name, credential.to_row())
                logger.info(f"Added credentials for user {credential.user_name}")

    def update_tokens(self, user_id: str, tokens: TokenPair) -> bool:
        """Replace the token columns of an existing row

        Returns:
            True if the user's row was updated, False if the user is unknown

        Raises:
            StoreUnavailable: If the credentials sheet does not exist
        """
        with self.backend.lock:
            rows = self._rows()
            index = self._find_index(rows, user_id)
            if index is None:
                logger.warning(f"No credentials row for user {user_id}, tokens not saved")
                return False
            current = Credential.from_row(rows[index])
            current.access_token = tokens.access_token
            current.refresh_token = tokens.refresh_token
            self.backend.update_row(self.sheet_name, index, current.to_row())
        logger.info(f"Updated tokens for user {user_id}")
        return True

    def delete_credentials(self, user_id: str) -> bool:
        """Remove the row of ``user_id``

        Returns:
            True if a row was removed
        """
        with self.backend.lock:
            index = self._find_index(self._rows(), user_id)
            if index is None:
                return False
            self.backend.delete_row(self.sheet_name, index)
        logger.info(f"Deleted credentials for user {user_id}")
        return True
