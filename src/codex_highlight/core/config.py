import os

DEFAULT_THEME = "github-dark"


def get_default_theme() -> str:
    return os.getenv("CODEX_HIGHLIGHT_THEME", DEFAULT_THEME)


def get_api_host() -> str:
    return os.getenv("CODEX_HIGHLIGHT_API_HOST", "127.0.0.1")


def get_api_port() -> int:
    return int(os.getenv("CODEX_HIGHLIGHT_API_PORT", "8000"))
