"""Localized prompt tables.

One YAML file per language ships inside this package. Every key is
required, so a catalog that is missing a prompt fails at startup rather
than mid-conversation.
"""

import logging
from importlib import resources
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from wasifu.core.constants import Language
from wasifu.core.errors import ConfigError

logger = logging.getLogger(__name__)


class PromptCatalog(BaseModel):
    """Prompt strings for one language."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    welcome: str
    language_retry: str
    choice_retry: str
    too_many_attempts: str

    name_prompt: str
    name_retry: str
    name_thanks: str

    county_prompt: str
    county_retry: str

    subcounty_prompt: str
    subcounty_retry: str

    ward_prompt: str
    ward_retry: str

    summary: str
    main_menu_label: str
    go_back_label: str
    closing: str

    main_menu_prompt: str
    topic_unavailable: str
    sub_menu_prompt: str

    card_greeting: str
    news_links_label: str
    card_go_back_label: str
    choose_action_prompt: str
    news_link_message: str
    go_back_prompt: str


class LocalizationTable:
    """Maps a Language to its PromptCatalog."""

    # Order in which the bilingual welcome is composed
    WELCOME_ORDER = (Language.SW, Language.EN)

    def __init__(self, catalogs: dict[Language, PromptCatalog]) -> None:
        missing = [lang.value for lang in Language if lang not in catalogs]
        if missing:
            raise ConfigError(f"Missing prompt catalogs for: {', '.join(missing)}")
        self._catalogs = dict(catalogs)

    def for_language(self, language: Language | str) -> PromptCatalog:
        """Get the catalog for a language tag."""
        return self._catalogs[Language(language)]

    @property
    def welcome(self) -> str:
        """Language-selection prompt, shown before any language is chosen."""
        return "  ".join(self._catalogs[lang].welcome for lang in self.WELCOME_ORDER)

    @classmethod
    def load(cls, directory: Path | str | None = None) -> "LocalizationTable":
        """Load ``<lang>.yaml`` catalogs.

        Args:
            directory: Folder holding en.yaml/sw.yaml; None uses the packaged catalogs

        Raises:
            ConfigError: If a catalog is missing, unreadable or incomplete
        """
        catalogs: dict[Language, PromptCatalog] = {}
        for language in Language:
            filename = f"{language.value.lower()}.yaml"
            try:
                if directory is None:
                    text = resources.files("wasifu.localization").joinpath(filename).read_text(
                        encoding="utf-8"
                    )
                else:
                    text = (Path(directory) / filename).read_text(encoding="utf-8")
                data = yaml.safe_load(text) or {}
                catalogs[language] = PromptCatalog.model_validate(data)
            except (OSError, yaml.YAMLError, PydanticValidationError) as e:
                raise ConfigError(f"Invalid prompt catalog {filename}: {e}") from e

        logger.debug(f"Loaded prompt catalogs: {[lang.value for lang in catalogs]}")
        return cls(catalogs)
