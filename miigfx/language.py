"""Message catalogues for translated user-interface strings."""

from __future__ import annotations

import json
from enum import IntEnum
from pathlib import Path

HASH_MULTIPLIER = 31


class Language(IntEnum):
    """Software keyboard language codes used by the system settings."""

    JAPANESE = 0
    ENGLISH = 1
    FRENCH = 2
    GERMAN = 3
    ITALIAN = 4
    SPANISH = 5
    TRADITIONAL_CHINESE = 6
    KOREAN = 7
    DUTCH = 8
    PORTUGUESE = 9
    RUSSIAN = 10
    SIMPLIFIED_CHINESE = 11


_FILES = {
    Language.JAPANESE: ("japanese.json", "Japanese"),
    Language.ENGLISH: ("english.json", "English"),
    Language.GERMAN: ("german.json", "German"),
    Language.ITALIAN: ("italian.json", "Italian"),
    Language.SPANISH: ("spanish.json", "Spanish"),
    Language.TRADITIONAL_CHINESE: ("TChinese.json", "Traditional Chinese"),
    Language.KOREAN: ("korean.json", "Korean"),
    Language.PORTUGUESE: ("portuguese.json", "Portuguese"),
    Language.RUSSIAN: ("russian.json", "Russian"),
    Language.SIMPLIFIED_CHINESE: ("SChinese.json", "Simplified Chinese"),
}
_DEFAULT = ("english.json", "English")


def hash_string(text: str) -> int:
    """Multiplicative 32-bit hash over the UTF-8 bytes of ``text``."""
    value = 0
    for byte in text.encode("utf-8"):
        value = (value * HASH_MULTIPLIER + byte) & 0xFFFFFFFF
    return value


class Catalog:
    """Translations keyed by the hash of their message id."""

    def __init__(self) -> None:
        self._messages: dict[int, str] = {}
        self.loaded_language: Language | None = None

    def __len__(self) -> int:
        return len(self._messages)

    def set_message(self, msgid: str, msgstr: str | None) -> None:
        """Store a translation; a later one for the same id wins."""
        if msgstr is None:
            return
        self._messages[hash_string(msgid)] = msgstr

    def load_bytes(self, data: bytes | str) -> bool:
        """Add the string entries of a JSON object; False if none could be read."""
        try:
            document = json.loads(data)
        except ValueError:
            return False
        if not isinstance(document, dict) or not document:
            return False
        for key, value in document.items():
            if isinstance(value, str):
                self.set_message(key, value)
        return True

    def load_file(self, path: str | Path) -> bool:
        """Load a JSON translation file; False if it is missing or unusable."""
        try:
            data = Path(path).read_bytes()
        except OSError:
            return False
        return self.load_bytes(data)

    def load_language(self, language: Language | int, directory: str | Path) -> bool:
        """Load the translation file for ``language`` from ``directory``."""
        try:
            language = Language(language)
        except ValueError:
            pass
        self.loaded_language = language if isinstance(language, Language) else None
        filename, _ = _FILES.get(language, _DEFAULT)
        return self.load_file(Path(directory) / filename)

    def gettext(self, msgid: str) -> str:
        """Return the translation of ``msgid``, or ``msgid`` itself."""
        return self._messages.get(hash_string(msgid), msgid)

    def loaded_language_name(self) -> str:
        """Translated name of the language last loaded."""
        _, name = _FILES.get(self.loaded_language, _DEFAULT)
        return self.gettext(name)

    def clear(self) -> None:
        """Forget every stored translation."""
        self._messages.clear()