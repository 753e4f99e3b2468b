"""Core constants and enums."""

from enum import Enum

# Cursor value of a conversation whose flow has terminated.
TERMINAL_CURSOR = -1

# Upper bound of step executions inside one turn.
MAX_STEPS_PER_TURN = 20


class Language(str, Enum):
    """Languages the intake flow can be conducted in."""

    EN = "EN"
    SW = "SW"


class FlowVariant(str, Enum):
    """Known revisions of the intake flow."""

    BASIC = "basic"
    EXTENDED = "extended"


class StepName(str, Enum):
    """Names of the intake steps, also used as answer keys."""

    LANGUAGE = "language"
    NAME = "name"
    NAME_CONFIRM = "name_confirm"
    COUNTY = "county"
    SUB_COUNTY = "subcounty"
    WARD = "ward"
    SUMMARY = "summary"
    MAIN_MENU = "main_menu"
    SUB_MENU = "sub_menu"
    CHOOSE_ACTION = "choose_action"
