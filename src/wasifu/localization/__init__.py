"""Localization tables for intake prompts."""

from wasifu.localization.catalog import LocalizationTable, PromptCatalog

__all__ = ["LocalizationTable", "PromptCatalog"]
