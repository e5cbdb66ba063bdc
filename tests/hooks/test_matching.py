"""Tests for condition evaluation."""

import hookctl.hooks.config as config
import hookctl.hooks.events as events
import hookctl.hooks.matching as matching


def _conditions(**kwargs: object) -> config.HookConditions:
    return config.HookConditions.model_validate(kwargs)


class TestMatches:
    """Tests for the matches() function."""

    def test_none_conditions_always_match(self) -> None:
        """Unconditional hooks match every context."""
        assert matching.matches(None, events.ExecutionContext())
        assert matching.matches(None, events.ExecutionContext(actor="x", path="y", phase="z"))

    def test_empty_conditions_match(self) -> None:
        """A conditions block with nothing set imposes no constraint."""
        assert matching.matches(_conditions(), events.ExecutionContext())

    def test_agent_in_set(self) -> None:
        conditions = _conditions(if_agent=["coder", "tester"])
        assert matching.matches(conditions, events.ExecutionContext(actor="coder"))
        assert not matching.matches(conditions, events.ExecutionContext(actor="writer"))

    def test_missing_actor_fails_agent_condition(self) -> None:
        """A context without an actor never satisfies if_agent."""
        conditions = _conditions(if_agent=["coder"])
        assert not matching.matches(conditions, events.ExecutionContext())

    def test_file_pattern_searches_path(self) -> None:
        conditions = _conditions(if_file_matches=r"\.md$")
        assert matching.matches(conditions, events.ExecutionContext(path="docs/readme.md"))
        assert not matching.matches(conditions, events.ExecutionContext(path="src/app.js"))

    def test_file_pattern_is_search_not_fullmatch(self) -> None:
        """The pattern may match anywhere in the path."""
        conditions = _conditions(if_file_matches="docs/")
        assert matching.matches(conditions, events.ExecutionContext(path="project/docs/a.txt"))

    def test_missing_path_fails_file_condition(self) -> None:
        conditions = _conditions(if_file_matches=".*")
        assert not matching.matches(conditions, events.ExecutionContext(actor="coder"))

    def test_phase_is_exact(self) -> None:
        conditions = _conditions(if_phase="review")
        assert matching.matches(conditions, events.ExecutionContext(phase="review"))
        assert not matching.matches(conditions, events.ExecutionContext(phase="reviewing"))
        assert not matching.matches(conditions, events.ExecutionContext())

    def test_all_conditions_anded(self) -> None:
        """Every present condition must hold."""
        conditions = _conditions(if_agent=["coder"], if_file_matches=r"\.py$", if_phase="build")
        good = events.ExecutionContext(actor="coder", path="a.py", phase="build")
        assert matching.matches(conditions, good)
        assert not matching.matches(conditions, events.ExecutionContext(actor="coder", path="a.py", phase="test"))
        assert not matching.matches(conditions, events.ExecutionContext(actor="other", path="a.py", phase="build"))
        assert not matching.matches(conditions, events.ExecutionContext(actor="coder", path="a.js", phase="build"))

    def test_evaluation_does_not_mutate_context(self) -> None:
        """Evaluating twice gives the same answer and leaves the payload alone."""
        conditions = _conditions(if_agent=["coder"])
        context = events.ExecutionContext(actor="coder", payload={"k": [1, 2]})
        assert matching.matches(conditions, context)
        assert matching.matches(conditions, context)
        assert context.payload == {"k": [1, 2]}


class TestConditionMatcher:
    """Tests for the reusable ConditionMatcher."""

    def test_matcher_reused_across_contexts(self) -> None:
        matcher = matching.ConditionMatcher(_conditions(if_file_matches=r"^src/"))
        assert matcher.matches(events.ExecutionContext(path="src/main.py"))
        assert not matcher.matches(events.ExecutionContext(path="tests/test_main.py"))
