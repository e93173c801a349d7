"""Player-facing message catalog."""

from __future__ import annotations

from twig_cap.models import Player

CANNOT_BUILD_TWIG = "CannotBuildTwig"

DEFAULT_MESSAGES: dict[str, str] = {
    CANNOT_BUILD_TWIG: (
        "You cannot build more twig blocks in this building. The limit of {0} has been reached. "
        "Upgrade or remove existing twig blocks to build more."
    ),
}


class MessageCatalog:
    """Per-language message templates with fallback to the default language."""

    def __init__(self, default_language: str = "en") -> None:
        self._default_language = default_language
        self._messages: dict[str, dict[str, str]] = {}

    def register_messages(self, messages: dict[str, str], language: str | None = None) -> None:
        self._messages.setdefault(language or self._default_language, {}).update(messages)

    def languages(self) -> list[str]:
        return sorted(self._messages)

    def get_message(self, key: str, language: str | None = None) -> str:
        for candidate in (language, self._default_language):
            if candidate and key in self._messages.get(candidate, {}):
                return self._messages[candidate][key]
        return key

    def format_for(self, player: Player, key: str, *args: object) -> str:
        message = self.get_message(key, player.language)
        if args:
            message = message.format(*args)
        return message
