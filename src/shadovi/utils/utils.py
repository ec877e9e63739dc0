# shadovi/utils/utils.py
"""
shadovi.utils.utils.py
======================

Core utility functions for the shadovi editor.

Key functionalities include:
- Robust Configuration Loading: an embedded default configuration is
  recursively merged with user settings from `~/.config/shadovi/config.toml`
  (or the file named by the `SHADOVI_CONFIG` environment variable).
- Highlighting Profiles: the `[filetypes.*]` tables that describe which
  syntax classes are highlighted for which language.
- Helper Utilities: deep-merging dictionaries and hex to xterm-256 colour
  conversion.

The editor is always runnable, even if the user configuration file is
missing or corrupted, because the embedded defaults are used as a fallback.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("shadovi")

# --- Constants ---
APP_NAME = "ShadoVi"
VERSION = "0.1.0"

WHITE_FG_IDX = 255

# Hardcoded fallback configuration. The application can ALWAYS start with it.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_width": 2,
        "quit_times": 3,
        "message_timeout": 5,
    },
    "colors": {
        "none": "#FFFFFF",
        "number": "#DCA3A3",
        "match": "#268BD2",
        "string": "#D33682",
        "character": "#6C71C4",
        "comment": "#859900",
        "keyword_primary": "#B58900",
        "status_fg": "#3F3F3F",
        "status_bg": "#EFEFEF",
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "handle_up": ["up"],
        "handle_down": ["down"],
        "handle_left": ["left"],
        "handle_right": ["right"],
    },
    "filetypes": {
        "rust": {
            "aliases": ["rust", "rs"],
            "numbers": True, "strings": True, "characters": True, "comments": True,
            "primary_keywords": [
                "as", "break", "const", "continue", "crate", "else", "enum", "extern",
                "false", "fn", "for", "if", "impl", "in", "let", "loop", "match", "mod",
                "move", "mut", "pub", "ref", "return", "self", "Self", "static",
                "struct", "super", "trait", "true", "type", "unsafe", "use", "where",
                "while", "dyn", "async", "await",
            ],
        },
        "c": {
            "aliases": ["c", "cpp", "c++", "objective-c"],
            "numbers": True, "strings": True, "characters": True, "comments": True,
            "primary_keywords": [
                "auto", "break", "case", "const", "continue", "default", "do", "else",
                "enum", "extern", "for", "goto", "if", "register", "return", "sizeof",
                "static", "struct", "switch", "typedef", "union", "volatile", "while",
            ],
        },
        "go": {
            "aliases": ["go", "golang"],
            "numbers": True, "strings": True, "characters": True, "comments": True,
            "primary_keywords": [
                "break", "case", "chan", "const", "continue", "default", "defer", "else",
                "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
                "map", "package", "range", "return", "select", "struct", "switch",
                "type", "var",
            ],
        },
        "javascript": {
            "aliases": ["javascript", "js", "typescript", "ts"],
            "numbers": True, "strings": True, "characters": False, "comments": True,
            "primary_keywords": [
                "break", "case", "catch", "class", "const", "continue", "default",
                "delete", "do", "else", "export", "extends", "finally", "for",
                "function", "if", "import", "let", "new", "return", "switch", "this",
                "throw", "try", "typeof", "var", "while",
            ],
        },
        "java": {
            "aliases": ["java", "kotlin", "scala"],
            "numbers": True, "strings": True, "characters": True, "comments": True,
            "primary_keywords": [
                "abstract", "break", "case", "catch", "class", "continue", "default",
                "do", "else", "extends", "final", "finally", "for", "if", "implements",
                "import", "interface", "new", "package", "private", "protected",
                "public", "return", "static", "switch", "this", "throw", "try", "while",
            ],
        },
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def get_user_config_path() -> Path:
    """Returns the user config path, honouring the `SHADOVI_CONFIG` override."""
    override = os.environ.get("SHADOVI_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "shadovi" / "config.toml"


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = get_user_config_path()
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    Nested dictionaries are copied, so the result never aliases `override`.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict):
            current = result.get(key)
            result[key] = deep_merge(current if isinstance(current, dict) else {}, value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
