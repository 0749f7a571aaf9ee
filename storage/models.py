"""Data models for stored credentials"""

from dataclasses import dataclass
from typing import List

CREDENTIAL_HEADER = ["user_id", "user_name", "token", "refresh_token"]


def mask_token(token: str) -> str:
    """Short preview of a secret that is safe to display"""
    if not token:
        return ""
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


@dataclass
class Credential:
    """Per-user credential row

    Attributes:
        user_id: X user id (unique key)
        user_name: X username
        access_token: Bearer token
        refresh_token: Refresh token
    """
    user_id: str
    user_name: str
    access_token: str
    refresh_token: str

    @classmethod
    def from_row(cls, row: List[str]) -> "Credential":
        cells = list(row) + [""] * (len(CREDENTIAL_HEADER) - len(row))
        return cls(
            user_id=str(cells[0]).strip(),
            user_name=str(cells[1]),
            access_token=str(cells[2]),
            refresh_token=str(cells[3]),
        )

    def to_row(self) -> List[str]:
        return [self.user_id, self.user_name, self.access_token, self.refresh_token]

    def summary(self) -> dict:
        """Display-safe view without full secrets"""
        return {
            "user_id": self.user_id,
            "user_name": self.user_name,
            "access_token": mask_token(self.access_token),
            "refresh_token": mask_token(self.refresh_token),
        }
