"""PKCE (Proof Key for Code Exchange) generation and single-slot session storage"""

import base64
import hashlib
import json
import logging
import os
import platform
import secrets
import tempfile
import threading
from pathlib import Path
from typing import Optional, Tuple, Union

from .models import PkceSession

logger = logging.getLogger(__name__)


def generate_pkce() -> Tuple[str, str]:
    """Generate PKCE code verifier and challenge

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    # 32 random bytes -> 43 char base64url verifier
    code_verifier = base64.urlsafe_b64encode(secrets.token_bytes(32)).decode('utf-8').rstrip('=')
    return code_verifier, code_challenge_for(code_verifier)


def code_challenge_for(code_verifier: str) -> str:
    """S256 challenge: base64url(SHA-256(verifier)) without padding"""
    digest = hashlib.sha256(code_verifier.encode('utf-8')).digest()
    return base64.urlsafe_b64encode(digest).decode('utf-8').rstrip('=')


def generate_state() -> str:
    """Generate an anti-CSRF state token"""
    return secrets.token_urlsafe(32)


class PKCESessionStore:
    """Holds at most one in-flight authorization

    Saving a new session overwrites the previous one (last writer wins).
    With ``session_file`` set the file is the slot itself, shared by every
    process pointing at it; nothing is cached in memory.
    """

    def __init__(self, session_file: Optional[Union[str, Path]] = None):
        self.session_file = Path(session_file) if session_file else None
        self._session: Optional[PkceSession] = None
        self._lock = threading.Lock()

    def save(self, session: PkceSession) -> None:
        """Store ``session`` as the current slot"""
        with self._lock:
            if self.session_file is None:
                self._session = session
                return
            self._write_file(session)

    def _write_file(self, session: PkceSession) -> None:
        self.session_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.session_file.parent, suffix=".tmp")
        try:
            # mkstemp creates the file 0600
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"code_verifier": session.code_verifier, "state": session.state}, f)
            if platform.system() != "Windows":
                os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.session_file)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self) -> Optional[PkceSession]:
        """Return the current session, or None if nothing is in flight"""
        with self._lock:
            if self.session_file is None:
                return self._session
            try:
                data = json.loads(self.session_file.read_text(encoding="utf-8"))
            except FileNotFoundError:
                return None
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Ignoring unreadable PKCE session file {self.session_file}: {e}")
                return None
            verifier = data.get("code_verifier")
            state = data.get("state")
            if verifier and state:
                return PkceSession(code_verifier=verifier, state=state)
            return None

    def clear(self) -> None:
        """Drop the current session"""
        with self._lock:
            self._session = None
            if self.session_file is not None:
                self.session_file.unlink(missing_ok=True)
