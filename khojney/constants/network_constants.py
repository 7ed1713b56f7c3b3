"""Network configuration constants for the quiz application."""

import os

DEFAULT_HOST: str = os.getenv("KHOJNEY_HOST", "127.0.0.1")
DEFAULT_PORT: int = int(os.getenv("KHOJNEY_PORT", "8000"))
