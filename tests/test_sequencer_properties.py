"""
Property-based tests for the workflow sequencer.

Verifies graph validation at construction time, that runs follow only the
declared edges and end in a terminal outcome, and that missing actions or
transitions surface as errors.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from addon_registration.enums import Outcome
from addon_registration.exceptions import (
    MissingActionError,
    MissingTransitionError,
    WorkflowDefinitionError,
)
from addon_registration.sequencer import WorkflowDefinition, WorkflowSequencer


class RecordingActions:
    """Builds step actions returning scripted outcomes and records the visits."""

    def __init__(self, outcomes: dict) -> None:
        self.outcomes = outcomes
        self.visited: list = []

    def action(self, step):
        def run() -> Outcome:
            self.visited.append(step)
            return self.outcomes.get(step, Outcome.NEXT)
        return run

    def mapping(self) -> dict:
        return {step: self.action(step) for step in self.outcomes}


def chain_definition(length: int) -> WorkflowDefinition:
    """Linear workflow step0 -> step1 -> ... -> next, every step may abort."""
    transitions = {}
    for index in range(length):
        target = f"step{index + 1}" if index + 1 < length else Outcome.NEXT
        transitions[f"step{index}"] = {Outcome.NEXT: target, Outcome.ABORT: Outcome.ABORT}
    return WorkflowDefinition(entry="step0", transitions=transitions)


class TestDefinitionValidation:
    """WorkflowDefinition rejects inconsistent graphs at construction."""

    def test_unknown_entry(self) -> None:
        with pytest.raises(WorkflowDefinitionError) as exc_info:
            WorkflowDefinition(entry="start", transitions={"other": {Outcome.NEXT: Outcome.NEXT}})

        assert exc_info.value.code == "unknown_entry"

    def test_edge_to_undeclared_step(self) -> None:
        with pytest.raises(WorkflowDefinitionError) as exc_info:
            WorkflowDefinition(entry="a", transitions={"a": {Outcome.NEXT: "b"}})

        assert exc_info.value.code == "unknown_step"

    def test_edge_to_non_terminal_outcome(self) -> None:
        with pytest.raises(WorkflowDefinitionError) as exc_info:
            WorkflowDefinition(entry="a", transitions={"a": {Outcome.NEXT: Outcome.BACK}})

        assert exc_info.value.code == "non_terminal_target"

    def test_unreachable_step(self) -> None:
        with pytest.raises(WorkflowDefinitionError) as exc_info:
            WorkflowDefinition(
                entry="a",
                transitions={
                    "a": {Outcome.NEXT: Outcome.NEXT},
                    "orphan": {Outcome.NEXT: "a"},
                },
            )

        assert exc_info.value.code == "unreachable_step"
        assert exc_info.value.details["steps"] == ["orphan"]

    def test_custom_terminals(self) -> None:
        definition = WorkflowDefinition(
            entry="a",
            transitions={"a": {Outcome.NEXT: Outcome.BACK}},
            terminals=frozenset({Outcome.BACK}),
        )

        assert WorkflowSequencer().run({"a": lambda: Outcome.NEXT}, definition) == Outcome.BACK


class TestSequencerRun:
    """Running a workflow."""

    @given(length=st.integers(min_value=1, max_value=10))
    @settings(max_examples=50)
    def test_chain_visits_every_step_once(self, length: int) -> None:
        definition = chain_definition(length)
        actions = RecordingActions({f"step{index}": Outcome.NEXT for index in range(length)})

        result = WorkflowSequencer().run(actions.mapping(), definition)

        assert result == Outcome.NEXT
        assert actions.visited == [f"step{index}" for index in range(length)]

    @given(data=st.data())
    @settings(max_examples=50)
    def test_abort_short_circuits(self, data) -> None:
        length = data.draw(st.integers(min_value=1, max_value=10))
        abort_at = data.draw(st.integers(min_value=0, max_value=length - 1))
        definition = chain_definition(length)
        outcomes = {f"step{index}": Outcome.NEXT for index in range(length)}
        outcomes[f"step{abort_at}"] = Outcome.ABORT
        actions = RecordingActions(outcomes)

        result = WorkflowSequencer().run(actions.mapping(), definition)

        assert result == Outcome.ABORT
        assert actions.visited == [f"step{index}" for index in range(abort_at + 1)]

    def test_back_edge_revisits_step(self) -> None:
        definition = WorkflowDefinition(
            entry="search",
            transitions={
                "search": {Outcome.NEXT: "confirm"},
                "confirm": {Outcome.NEXT: Outcome.NEXT, Outcome.BACK: "search"},
            },
        )
        confirm_results = iter([Outcome.BACK, Outcome.NEXT])
        visited = []

        def search() -> Outcome:
            visited.append("search")
            return Outcome.NEXT

        def confirm() -> Outcome:
            visited.append("confirm")
            return next(confirm_results)

        result = WorkflowSequencer().run({"search": search, "confirm": confirm}, definition)

        assert result == Outcome.NEXT
        assert visited == ["search", "confirm", "search", "confirm"]

    def test_missing_action_fails_before_running(self) -> None:
        definition = chain_definition(3)
        actions = RecordingActions({"step0": Outcome.NEXT, "step1": Outcome.NEXT})

        with pytest.raises(MissingActionError) as exc_info:
            WorkflowSequencer().run(actions.mapping(), definition)

        assert exc_info.value.details["steps"] == ["step2"]
        assert actions.visited == []

    def test_outcome_without_edge_is_fatal(self) -> None:
        definition = chain_definition(2)
        actions = RecordingActions({"step0": Outcome.BACK, "step1": Outcome.NEXT})

        with pytest.raises(MissingTransitionError) as exc_info:
            WorkflowSequencer().run(actions.mapping(), definition)

        assert exc_info.value.details == {"step": "step0", "outcome": "back"}
        assert actions.visited == ["step0"]

    def test_missing_transition_is_definition_error(self) -> None:
        assert issubclass(MissingTransitionError, WorkflowDefinitionError)
        assert issubclass(MissingActionError, WorkflowDefinitionError)
