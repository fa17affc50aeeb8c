import os

DEFAULT_ROSTER = (
    "Aarav Sharma",
    "Meera Patel",
    "Rahul Gupta",
    "Sneha Reddy",
    "Vikram Singh",
    "Anaya Jain",
    "Rohit Mehta",
    "Priya Desai",
)


def get_settings_module() -> str:
    # APP_ENV chọn module cấu hình, mặc định là 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def roster_from_env(default=DEFAULT_ROSTER) -> list:
    """Comma separated ROSTER env var, falling back to the demo class."""
    raw = os.getenv("ROSTER", "")
    names = [name.strip() for name in raw.split(",") if name.strip()]
    return names or list(default)
