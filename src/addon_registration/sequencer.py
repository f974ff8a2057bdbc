"""
Workflow sequencer driving a graph of named steps.

A WorkflowDefinition declares the entry step and, for every step, which
outcome leads where: either to another step or to a terminal outcome that
ends the workflow. WorkflowSequencer runs the step actions along those edges.

Definition problems are programming errors and raise; a step that merely
fails reports it through its outcome.
"""

from dataclasses import dataclass, field
from typing import Callable, Hashable, Mapping, Optional, Union

from .audit_logger import AuditLogger
from .enums import Outcome
from .exceptions import MissingActionError, MissingTransitionError, WorkflowDefinitionError

StepName = Hashable
Target = Union[StepName, Outcome]
StepAction = Callable[[], Outcome]

DEFAULT_TERMINALS = frozenset({Outcome.NEXT, Outcome.ABORT})


def _name(step: StepName) -> str:
    return getattr(step, "value", str(step))


@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Declarative step graph.

    Raises WorkflowDefinitionError on construction if the entry step is not
    declared, an edge points to an undeclared step or to an outcome which is
    not terminal, or a declared step cannot be reached from the entry.
    """

    entry: StepName
    transitions: Mapping[StepName, Mapping[Outcome, Target]]
    terminals: frozenset = field(default=DEFAULT_TERMINALS)

    def __post_init__(self) -> None:
        if self.entry not in self.transitions:
            raise WorkflowDefinitionError(
                code="unknown_entry",
                message=f"Entry step {_name(self.entry)!r} is not declared",
                details={"entry": _name(self.entry)},
            )

        for step, edges in self.transitions.items():
            for outcome, target in edges.items():
                if isinstance(target, Outcome):
                    if target not in self.terminals:
                        raise WorkflowDefinitionError(
                            code="non_terminal_target",
                            message=(
                                f"Step {_name(step)!r} leads to outcome "
                                f"{target.value!r} which is not terminal"
                            ),
                            details={"step": _name(step), "outcome": outcome.value},
                        )
                elif target not in self.transitions:
                    raise WorkflowDefinitionError(
                        code="unknown_step",
                        message=f"Step {_name(step)!r} leads to undeclared step {_name(target)!r}",
                        details={"step": _name(step), "target": _name(target)},
                    )

        unreachable = set(self.transitions) - self.reachable_steps()
        if unreachable:
            names = sorted(_name(step) for step in unreachable)
            raise WorkflowDefinitionError(
                code="unreachable_step",
                message=f"Steps not reachable from the entry: {', '.join(names)}",
                details={"steps": names},
            )

    @property
    def steps(self) -> frozenset:
        return frozenset(self.transitions)

    def reachable_steps(self) -> set:
        """Steps reachable from the entry along declared edges."""
        seen = {self.entry}
        pending = [self.entry]
        while pending:
            step = pending.pop()
            for target in self.transitions[step].values():
                if not isinstance(target, Outcome) and target not in seen:
                    seen.add(target)
                    pending.append(target)
        return seen

    def next_target(self, step: StepName, outcome: Outcome) -> Target:
        """
        Look up where the outcome of a step leads.

        Raises:
            MissingTransitionError: If the step has no edge for the outcome
        """
        edges = self.transitions[step]
        if outcome not in edges:
            outcome_name = getattr(outcome, "value", repr(outcome))
            raise MissingTransitionError(
                code="missing_transition",
                message=f"Step {_name(step)!r} has no transition for outcome {outcome_name!r}",
                details={"step": _name(step), "outcome": outcome_name},
            )
        return edges[outcome]


class WorkflowSequencer:
    """Runs step actions along the edges of a WorkflowDefinition."""

    def __init__(self, logger: Optional[AuditLogger] = None) -> None:
        self._logger = logger

    def run(
        self,
        actions: Mapping[StepName, StepAction],
        definition: WorkflowDefinition,
    ) -> Outcome:
        """
        Execute the workflow from its entry step until a terminal outcome.

        Args:
            actions: Step name => zero-argument callable returning an Outcome
            definition: The step graph

        Returns:
            The terminal outcome reached

        Raises:
            MissingActionError: If a declared step has no action (checked
                before any step runs)
            MissingTransitionError: If a step returns an outcome without edge
        """
        missing = definition.steps - set(actions)
        if missing:
            names = sorted(_name(step) for step in missing)
            raise MissingActionError(
                code="missing_action",
                message=f"No action for steps: {', '.join(names)}",
                details={"steps": names},
            )

        current: StepName = definition.entry
        while True:
            self._log_debug(f"Running step {_name(current)}")
            outcome = actions[current]()
            target = definition.next_target(current, outcome)

            if isinstance(target, Outcome):
                self._log_debug(
                    f"Workflow finished with {target.value}",
                    {"step": _name(current), "outcome": outcome.value},
                )
                return target

            self._log_debug(
                f"Step {_name(current)} returned {outcome.value}",
                {"next_step": _name(target)},
            )
            current = target

    def _log_debug(self, message: str, data: Optional[dict] = None) -> None:
        if self._logger:
            self._logger.debug("WorkflowSequencer", message, data)
