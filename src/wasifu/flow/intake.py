"""Intake step table.

Steps are plain functions of a ``StepContext``. Both revisions of the flow
share the same functions; they differ only in which steps are listed.
"""

import logging
from dataclasses import dataclass

from wasifu.config.models import FlowSettings
from wasifu.core.constants import FlowVariant, Language, StepName
from wasifu.core.errors import ConfigError, ReferenceInconsistencyError, StepError
from wasifu.core.outcomes import StepOutcome, advance, prompt, restart, retry, terminate
from wasifu.core.types import CardAction, Choice, RichCard, SequencerState, UserProfile
from wasifu.flow.sequencer import Step, StepContext, StepSequencer
from wasifu.localization.catalog import LocalizationTable, PromptCatalog
from wasifu.reference.counties import CountyDirectory
from wasifu.validation.choices import to_choices
from wasifu.validation.registry import ValidatorRegistry

logger = logging.getLogger(__name__)

# Ordered to match the numbering of the bilingual welcome text
LANGUAGE_CHOICES = [
    Choice(value=Language.SW.value, label="Kiswahili", synonyms=("Swahili",)),
    Choice(value=Language.EN.value, label="English", synonyms=("Kingereza", "Kiingereza")),
]

MAIN_MENU_TOPICS = ["INFORMATION", "NEWS", "REFERRAL", "SURVEY", "UPDATE PROFILE", "SHARE"]
NEWS_TOPIC = "NEWS"
UPDATE_PROFILE_TOPIC = "UPDATE PROFILE"

LATEST_LEGAL_NEWS = "LATEST LEGAL NEWS"
SUB_MENU_ITEMS = [LATEST_LEGAL_NEWS]

MAIN_MENU = "main_menu"
GO_BACK = "go_back"
NEWS_LINKS = "news_links"


@dataclass(frozen=True)
class FlowResources:
    """Read-only collaborators shared by every conversation."""

    localization: LocalizationTable
    counties: CountyDirectory
    settings: FlowSettings


def _catalog(ctx: StepContext) -> PromptCatalog:
    language = ctx.language
    if language is None:
        raise StepError(f"Step '{ctx.step}' needs a language but none was chosen")
    return ctx.resources.localization.for_language(language)


def _settings(ctx: StepContext) -> FlowSettings:
    return ctx.resources.settings


# ─────────────────────────────────────────────────────────────────
# Registration steps
# ─────────────────────────────────────────────────────────────────


def language_step(ctx: StepContext) -> StepOutcome:
    localization: LocalizationTable = ctx.resources.localization
    if ctx.entering:
        retry_text = "  ".join(
            localization.for_language(lang).language_retry
            for lang in LocalizationTable.WELCOME_ORDER
        )
        return prompt(localization.welcome, LANGUAGE_CHOICES, retry_text=retry_text)
    return advance(ctx.choice.value)  # type: ignore[union-attr]


def name_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    if ctx.entering:
        return prompt(catalog.name_prompt, retry_text=catalog.name_retry)

    if not ValidatorRegistry.validate(_settings(ctx).name_validator, ctx.reply):
        return retry()
    return advance(ctx.reply)


def name_confirm_step(ctx: StepContext) -> StepOutcome:
    """Acknowledge the name; never prompts."""
    catalog = _catalog(ctx)
    return advance(message=catalog.name_thanks.format(name=ctx.answers[StepName.NAME.value]))


def county_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    configured = _settings(ctx).county_choices
    if ctx.entering:
        choices = to_choices(configured) if configured else None
        return prompt(catalog.county_prompt, choices, retry_text=catalog.county_retry)

    value = ctx.choice.value if ctx.choice else (ctx.reply or "").strip()
    counties: CountyDirectory = ctx.resources.counties
    if value not in counties:
        return retry()
    return advance(value)


def sub_county_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    county_name = ctx.answers.get(StepName.COUNTY.value)
    county = ctx.resources.counties.find_by_name(county_name) if county_name else None
    if county is None:
        raise ReferenceInconsistencyError(
            f"County answer {county_name!r} has no reference record "
            f"(conversation={ctx.state.conversation_id})"
        )

    if ctx.entering:
        return prompt(
            catalog.subcounty_prompt,
            to_choices(county.sub_counties),
            retry_text=catalog.subcounty_retry,
        )
    return advance(ctx.choice.value)  # type: ignore[union-attr]


def ward_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    if ctx.entering:
        return prompt(
            catalog.ward_prompt,
            to_choices(_settings(ctx).ward_choices),
            retry_text=catalog.ward_retry,
        )
    return advance(ctx.choice.value)  # type: ignore[union-attr]


def summary_step(ctx: StepContext) -> StepOutcome:
    """Finalize the profile and offer MAIN MENU / GO BACK."""
    catalog = _catalog(ctx)
    name = ctx.answers[StepName.NAME.value]
    if ctx.entering:
        choices = [
            Choice(value=MAIN_MENU, label=catalog.main_menu_label),
            Choice(value=GO_BACK, label=catalog.go_back_label),
        ]
        return prompt(
            catalog.summary.format(name=name),
            choices,
            retry_text=catalog.choice_retry,
            finalize=True,
        )

    if ctx.choice.value == GO_BACK:  # type: ignore[union-attr]
        return restart()
    if _settings(ctx).variant == FlowVariant.BASIC:
        return terminate(catalog.closing.format(name=name))
    return advance(MAIN_MENU)


# ─────────────────────────────────────────────────────────────────
# Menu steps (extended flow)
# ─────────────────────────────────────────────────────────────────


def main_menu_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    if ctx.entering:
        return prompt(
            catalog.main_menu_prompt.format(name=ctx.answers[StepName.NAME.value]),
            to_choices(MAIN_MENU_TOPICS),
            retry_text=catalog.choice_retry,
        )

    topic = ctx.choice.value  # type: ignore[union-attr]
    if topic == NEWS_TOPIC:
        return advance(topic)
    if topic == UPDATE_PROFILE_TOPIC:
        return restart()
    return advance(
        message=catalog.topic_unavailable.format(topic=topic),
        goto=StepName.MAIN_MENU.value,
    )


def sub_menu_step(ctx: StepContext) -> StepOutcome:
    catalog = _catalog(ctx)
    if ctx.entering:
        return prompt(
            catalog.sub_menu_prompt,
            to_choices(SUB_MENU_ITEMS),
            retry_text=catalog.choice_retry,
        )
    return advance(ctx.choice.value)  # type: ignore[union-attr]


def choose_action_step(ctx: StepContext) -> StepOutcome:
    """News card with a plain-choice fallback; holds until the user goes back."""
    catalog = _catalog(ctx)
    link = _settings(ctx).news_link
    go_back = Choice(value=GO_BACK, label=catalog.card_go_back_label)

    if ctx.entering:
        if ctx.answers.get(StepName.SUB_MENU.value) != LATEST_LEGAL_NEWS:
            return prompt(
                catalog.go_back_prompt,
                [go_back],
                retry_text=catalog.choice_retry,
                resume_at=StepName.CHOOSE_ACTION.value,
            )

        choices = [Choice(value=NEWS_LINKS, label=catalog.news_links_label), go_back]
        card = RichCard(
            body=[catalog.card_greeting],
            actions=[CardAction(title=choice.label, data=link) for choice in choices],
        )
        return prompt(
            catalog.choose_action_prompt,
            choices,
            retry_text=catalog.choice_retry,
            card=card,
        )

    if ctx.choice.value == NEWS_LINKS:  # type: ignore[union-attr]
        return advance(
            message=catalog.news_link_message.format(link=link),
            goto=StepName.CHOOSE_ACTION.value,
        )
    return advance(goto=StepName.MAIN_MENU.value)


# ─────────────────────────────────────────────────────────────────
# Step tables
# ─────────────────────────────────────────────────────────────────

BASIC_STEPS = [
    Step(StepName.LANGUAGE.value, language_step),
    Step(StepName.NAME.value, name_step),
    Step(StepName.COUNTY.value, county_step),
    Step(StepName.SUB_COUNTY.value, sub_county_step),
    Step(StepName.WARD.value, ward_step),
    Step(StepName.SUMMARY.value, summary_step),
]

EXTENDED_STEPS = [
    Step(StepName.LANGUAGE.value, language_step),
    Step(StepName.NAME.value, name_step),
    Step(StepName.NAME_CONFIRM.value, name_confirm_step),
    Step(StepName.COUNTY.value, county_step),
    Step(StepName.SUB_COUNTY.value, sub_county_step),
    Step(StepName.WARD.value, ward_step),
    Step(StepName.SUMMARY.value, summary_step),
    Step(StepName.MAIN_MENU.value, main_menu_step),
    Step(StepName.SUB_MENU.value, sub_menu_step),
    Step(StepName.CHOOSE_ACTION.value, choose_action_step),
]


def build_profile(answers: dict[str, str]) -> UserProfile:
    """Assemble the five-field profile from step answers."""
    return UserProfile(
        language=Language(answers[StepName.LANGUAGE.value]),
        name=answers[StepName.NAME.value],
        county=answers[StepName.COUNTY.value],
        subcounty=answers[StepName.SUB_COUNTY.value],
        ward=answers[StepName.WARD.value],
    )


def check_flow_settings(settings: FlowSettings, counties: CountyDirectory) -> None:
    """Reject settings that could never pass the county or name steps.

    Raises:
        ConfigError: If a configured county is not in the reference data, or
            the name validator is unknown
    """
    unknown = [name for name in settings.county_choices or [] if name not in counties]
    if unknown:
        raise ConfigError(f"county_choices not found in reference data: {', '.join(unknown)}")
    if not ValidatorRegistry.is_registered(settings.name_validator):
        available = ", ".join(ValidatorRegistry.list_validators())
        raise ConfigError(
            f"Unknown name validator '{settings.name_validator}'. Available: {available}"
        )


def build_intake_sequencer(resources: FlowResources) -> StepSequencer:
    """Create the sequencer for the configured flow variant."""
    settings = resources.settings
    check_flow_settings(settings, resources.counties)

    steps = EXTENDED_STEPS if settings.variant == FlowVariant.EXTENDED else BASIC_STEPS
    logger.info(f"Intake flow '{settings.variant.value}' with {len(steps)} steps")

    def exhausted_message(state: SequencerState) -> str:
        language = state.answers.get(StepName.LANGUAGE.value)
        localization = resources.localization
        if language:
            return localization.for_language(language).too_many_attempts
        return "  ".join(
            localization.for_language(lang).too_many_attempts
            for lang in LocalizationTable.WELCOME_ORDER
        )

    return StepSequencer(
        steps,
        resources,
        profile_builder=build_profile,
        max_retries=settings.max_retries,
        exhausted_message=exhausted_message,
    )
