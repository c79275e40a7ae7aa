from platformdirs import user_config_path

PACKAGE_NAME = "routekit"  # Python package name

# -----------------------------------------------------------------------------
# User-writable directories & files
# -----------------------------------------------------------------------------

# Base config directory (e.g. ~/.config/routekit/)
USER_CONFIG_DIR = user_config_path(PACKAGE_NAME, appauthor=False)

SETTING_PATH = USER_CONFIG_DIR / "settings.json"
COOKIES_DIR = USER_CONFIG_DIR / "cookies"

# Config files looked up in the working directory
LOCAL_CONFIG_FILENAMES = ["routekit.toml", "routekit.json"]

# Environment variable naming a config file, checked after an explicit path
CONFIG_ENV_VAR = "ROUTEKIT_CONFIG"
