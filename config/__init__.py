import os

_ENV_ALIASES = {
    "dev": "development",
    "development": "development",
    "test": "testing",
    "testing": "testing",
    "prod": "production",
    "production": "production",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for this process.

    ``SETTINGS_MODULE`` names a module outright (e.g. a school-specific
    override); otherwise ``APP_ENV`` picks one of the bundled modules.
    """

    explicit = os.getenv("SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    if env not in _ENV_ALIASES:
        raise ValueError(f"Unknown APP_ENV {env!r}; expected one of {sorted(set(_ENV_ALIASES.values()))}")
    return f"config.{_ENV_ALIASES[env]}"
