"""Configuration loader for X Sheet Poster

Values come from the process environment, which a ``.env`` file can seed
(variables already set in the environment win over the file). Each
setting declares a default, and the default's type decides how the raw
string is parsed.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("true", "1", "yes", "on")


# bool must be looked up before int: isinstance(True, int) is true
_PARSERS: Dict[type, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: int,
    float: float,
}


class ConfigLoader:
    """Typed access to environment settings"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: .env file to load; defaults to ``.env`` in the
                working directory. A missing file is not an error.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f"No .env file at {self.env_path}")

    def get(self, env_var: str, default: Any) -> Any:
        """
        Read ``env_var``, parsed to the type of ``default``

        Args:
            env_var: Environment variable name
            default: Value used when the variable is unset or unparsable;
                a string default starting with ``~/`` is expanded

        Returns:
            The parsed value or the default
        """
        raw = os.getenv(env_var)
        if raw is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default

        parser = next((p for t, p in _PARSERS.items() if isinstance(default, t)), None)
        if parser is None:
            return raw
        try:
            return parser(raw)
        except ValueError:
            logger.warning(f"Ignoring {env_var}={raw!r}: not a valid {type(default).__name__}, using {default!r}")
            return default

    def get_list(self, env_var: str, default: List[str]) -> List[str]:
        """Read a comma separated list; blank items are dropped"""
        raw = os.getenv(env_var)
        if raw is None:
            return list(default)
        return [item.strip() for item in raw.split(",") if item.strip()]


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
