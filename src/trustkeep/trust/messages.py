"""User-facing message catalog with locale overrides.

English is built in. Other locales are flat TOML files named
``locale_<code>.toml``, looked up first in an override directory (usually
the data directory) and then among the bundled locales. Keys a locale
does not define fall back to English.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

BUNDLED_LOCALES_DIR = Path(__file__).parent / "locales"

DEFAULT_MESSAGES: dict[str, str] = {
    "trust.description": "Usage: add <name>... | remove <name>... | list [name] | confirm | cancel",
    "trust.add": "You now trust %s.",
    "trust.add.confirm": "Trust %s? Use 'confirm' to proceed or 'cancel' to discard.",
    "trust.add.notify": "%s now trusts you.",
    "trust.add.none": "None of those names belong to a known principal.",
    "trust.remove": "You no longer trust %s.",
    "trust.remove.notify": "%s no longer trusts you.",
    "trust.list": "You trust: %s",
    "trust.list.other": "%s trusts: %s",
    "trust.list.empty": "You do not trust anyone.",
    "trust.list.empty.other": "%s does not trust anyone.",
    "trust.confirm.empty": "You have nothing to confirm.",
    "trust.cancel": "Pending trust request cancelled.",
    "trust.unknown": "Unknown principal: %s",
    "trust.error": "Could not read or write trusts for %s. Ask an operator to check the logs.",
}


def locale_filename(locale: str) -> str:
    return f"locale_{locale}.toml"


# Legacy chat colour codes: &0-&f colours, &k-&o styles, &r reset, &#RRGGBB
_COLOR_CODE = re.compile(r"&(#[0-9a-fA-F]{6}|[0-9a-fk-orA-FK-OR])")

ANSI_CODES = {
    "0": "30", "1": "34", "2": "32", "3": "36",
    "4": "31", "5": "35", "6": "33", "7": "37",
    "8": "90", "9": "94", "a": "92", "b": "96",
    "c": "91", "d": "95", "e": "93", "f": "97",
    "k": "5", "l": "1", "m": "9", "n": "4", "o": "3", "r": "0",
}  # fmt: skip
ANSI_RESET = "\033[0m"


def translate_color_codes(text: str, ansi: bool = True) -> str:
    """Turn ``&`` colour codes into ANSI escapes, or strip them when ``ansi`` is False."""

    def replace(match: re.Match[str]) -> str:
        if not ansi:
            return ""
        code = match.group(1).lower()
        if code.startswith("#"):
            r, g, b = (int(code[i : i + 2], 16) for i in (1, 3, 5))
            return f"\033[38;2;{r};{g};{b}m"
        return f"\033[{ANSI_CODES[code]}m"

    translated, count = _COLOR_CODE.subn(replace, text)
    if ansi and count:
        translated += ANSI_RESET
    return translated


class MessageCatalog:
    """Renders message keys in the configured locale.

    Templates may carry ``&`` colour codes. They become ANSI escapes when
    ``use_colors`` is set and are stripped otherwise. Arguments are
    substituted after translation, so names are never reinterpreted.
    """

    def __init__(
        self,
        locale: str = "en",
        override_dir: str | Path | None = None,
        use_colors: bool = False,
    ) -> None:
        self.locale = locale
        self.use_colors = use_colors
        self._messages: dict[str, str] = {}
        if locale != "en":
            self._messages = self._load_locale(locale, Path(override_dir) if override_dir else None)

    @staticmethod
    def _load_locale(locale: str, override_dir: Path | None) -> dict[str, str]:
        candidates = []
        if override_dir is not None:
            candidates.append(override_dir / locale_filename(locale))
        candidates.append(BUNDLED_LOCALES_DIR / locale_filename(locale))

        for path in candidates:
            if not path.exists():
                continue
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except (tomllib.TOMLDecodeError, OSError) as e:
                logger.warning(f"Skipping unreadable locale file {path}: {e}")
                continue
            unknown = set(data) - set(DEFAULT_MESSAGES)
            if unknown:
                logger.warning(f"Ignoring unknown message keys in {path}: {sorted(unknown)}")
            logger.debug(f"Loaded locale {locale} from {path}")
            return {k: str(v) for k, v in data.items() if k in DEFAULT_MESSAGES}

        logger.warning(f"Locale {locale!r} not found, falling back to English")
        return {}

    def template(self, key: str) -> str:
        """Raw template for a key. Raises KeyError for unknown keys."""
        if key in self._messages:
            return self._messages[key]
        return DEFAULT_MESSAGES[key]

    def render(self, key: str, *args: object) -> str:
        template = translate_color_codes(self.template(key), ansi=self.use_colors)
        return template % args if args else template
