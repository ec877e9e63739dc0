# shadovi/core/FileType.py
"""shadovi.core.FileType
=======================

Selects the highlighting profile for a file.

The language is detected with Pygments (`get_lexer_for_filename`), then the
lexer's aliases are matched against the ``aliases`` lists of the
``[filetypes.*]`` tables in the configuration. The first profile that shares
an alias supplies the `HighlightingOptions`. Files without a lexer get the
"No filetype" profile, which highlights nothing.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from shadovi.core.Highlighter import HighlightingOptions
from shadovi.utils.utils import DEFAULT_CONFIG

logger = logging.getLogger("shadovi")

NO_FILETYPE = "No filetype"


def options_from_profile(profile: dict[str, Any]) -> HighlightingOptions:
    """Builds `HighlightingOptions` from a ``[filetypes.<name>]`` table."""
    keywords = profile.get("primary_keywords", [])
    if isinstance(keywords, str):
        keywords = keywords.split()
    return HighlightingOptions(
        numbers=bool(profile.get("numbers", False)),
        strings=bool(profile.get("strings", False)),
        characters=bool(profile.get("characters", False)),
        comments=bool(profile.get("comments", False)),
        primary_keywords=tuple(str(k) for k in keywords if k),
    )


@dataclass(frozen=True)
class FileType:
    name: str = NO_FILETYPE
    options: HighlightingOptions = field(default_factory=HighlightingOptions)

    @classmethod
    def from_file_name(
        cls, file_name: Optional[str], config: Optional[dict[str, Any]] = None
    ) -> "FileType":
        """Detects the file type of `file_name` using Pygments and the config profiles."""
        if not file_name:
            return cls()

        try:
            lexer = get_lexer_for_filename(file_name)
        except ClassNotFound:
            logging.debug(f"Pygments: No lexer for filename '{file_name}'.")
            return cls()

        lexer_aliases = {alias.lower() for alias in lexer.aliases}
        profiles = (config or DEFAULT_CONFIG).get("filetypes", {})
        for profile_name, profile in profiles.items():
            if not isinstance(profile, dict):
                logger.warning("Ignoring malformed filetype profile %r.", profile_name)
                continue
            aliases = {str(a).lower() for a in profile.get("aliases", [profile_name])}
            if aliases & lexer_aliases:
                logging.debug(
                    f"FileType: '{file_name}' -> lexer '{lexer.name}', profile '{profile_name}'."
                )
                return cls(lexer.name, options_from_profile(profile))

        logging.debug(f"FileType: '{file_name}' -> lexer '{lexer.name}' without a profile.")
        return cls(lexer.name, HighlightingOptions())
