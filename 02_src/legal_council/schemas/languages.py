"""Languages offered as translation targets."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class LanguageOption:
    code: str
    name: str
    native_name: str


AUTO_DETECT = LanguageOption(code="auto", name="Auto Detect", native_name="Detect Language")

SUPPORTED_LANGUAGES: List[LanguageOption] = [
    LanguageOption("Hindi", "Hindi", "हिंदी"),
    LanguageOption("Malayalam", "Malayalam", "മലയാളം"),
    LanguageOption("Spanish", "Spanish", "Español"),
    LanguageOption("French", "French", "Français"),
    LanguageOption("German", "German", "Deutsch"),
    LanguageOption("Chinese", "Chinese", "中文"),
    LanguageOption("Japanese", "Japanese", "日本語"),
    LanguageOption("Arabic", "Arabic", "العربية"),
    LanguageOption("Russian", "Russian", "Русский"),
    LanguageOption("Portuguese", "Portuguese", "Português"),
    LanguageOption("English", "English", "English"),
]


def find_language(code: str) -> Optional[LanguageOption]:
    """Look up a supported language by code (case-insensitive)."""
    wanted = code.strip().lower()
    if wanted == AUTO_DETECT.code:
        return AUTO_DETECT
    for option in SUPPORTED_LANGUAGES:
        if option.code.lower() == wanted:
            return option
    return None
