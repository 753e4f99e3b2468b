"""Step sequencing for the intake dialogue."""

from wasifu.flow.intake import FlowResources, build_intake_sequencer, build_profile
from wasifu.flow.sequencer import Step, StepContext, StepSequencer, TurnResult

__all__ = [
    "FlowResources",
    "Step",
    "StepContext",
    "StepSequencer",
    "TurnResult",
    "build_intake_sequencer",
    "build_profile",
]
