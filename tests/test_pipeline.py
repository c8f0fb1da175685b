"""
Tests for the coercion -> validation -> commit pipeline.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from structura import Err, Ok, PipelineFailure, record
from structura.pipeline import apply, commit, run_pipeline, run_stage
from structura.schema import FieldSpec, schema_of
from tests.structs import Full

plain_values = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.text(),
    st.lists(st.integers()),
)


@record()
class Plain:
    a: int = 0
    b: object = None


class TestRunStage:
    def test_missing_hook_is_identity(self):
        spec = FieldSpec("foo")
        assert run_stage(spec, "coerce", None, "raw") == Ok("raw")

    def test_err_is_wrapped_as_pipeline_failure(self):
        spec = FieldSpec("foo")
        outcome = run_stage(spec, "validate", lambda v: Err("too small"), 1)
        assert isinstance(outcome.error, PipelineFailure)
        assert outcome.reason == "too small"
        assert outcome.error.details["stage"] == "validate"
        assert outcome.error.details["field"] == "foo"

    @pytest.mark.parametrize("exc", [ValueError, TypeError])
    def test_raising_hook_is_a_failure(self, exc):
        def hook(value):
            raise exc("cannot use this")

        outcome = run_stage(FieldSpec("foo"), "coerce", hook, 1)
        assert outcome.is_err()
        assert outcome.reason == "cannot use this"
        assert isinstance(outcome.error.__cause__, exc)

    def test_non_outcome_result_is_a_defect(self):
        with pytest.raises(TypeError, match="must return Ok or Err"):
            run_stage(FieldSpec("foo"), "coerce", lambda v: v, 1)


class TestRunPipeline:
    def test_validation_sees_coerced_value(self):
        seen = []

        def coerce(value):
            seen.append(("coerce", value))
            return Ok(int(value))

        def validate(value):
            seen.append(("validate", value))
            return Ok(value * 2)

        spec = FieldSpec(
            "n", coercible=True, validatable=True, coerce=coerce, validate=validate
        )
        assert run_pipeline(spec, "21") == Ok(42)
        assert seen == [("coerce", "21"), ("validate", 21)]

    def test_coercion_failure_skips_validation(self):
        calls = []
        spec = FieldSpec(
            "n",
            coercible=True,
            validatable=True,
            coerce=lambda v: Err("bad input"),
            validate=lambda v: calls.append(v) or Ok(v),
        )
        assert run_pipeline(spec, "x").reason == "bad input"
        assert calls == []

    def test_disabled_stages_ignore_hooks(self):
        spec = FieldSpec("n", coerce=lambda v: Err("never"))
        assert run_pipeline(spec, 5) == Ok(5)


class TestCommit:
    def test_commit_returns_new_record(self):
        original = Plain()
        outcome = commit(original, {"a": 3})
        assert outcome.unwrap() == Plain(a=3)
        assert original == Plain()

    def test_post_init_failure_is_reported(self):
        @record()
        class Checked:
            a: int = 0

            def __post_init__(self):
                if self.a < 0:
                    raise ValueError("a must not be negative")

        outcome = commit(Checked(), {"a": -1})
        assert outcome.reason == "a must not be negative"
        assert outcome.error.details["stage"] == "commit"

    def test_apply(self):
        spec = schema_of(Full).get("foo")
        assert apply(Full(), spec, "7").unwrap().foo == 7
        assert apply(Full(), spec, -7).is_err()


class TestPipelineProperties:
    @given(value=plain_values)
    def test_pass_through_fields_always_commit(self, value):
        outcome = Plain().put("b", value)
        assert outcome.is_ok()
        assert outcome.unwrap().get("b") == value

    @given(value=st.integers(min_value=0, max_value=2**52))
    def test_accepted_values_are_committed_coerced(self, value):
        for raw in (value, str(value), float(value)):
            assert Full().put("foo", raw).unwrap().get("foo") == value

    @given(value=st.integers(max_value=-1))
    def test_rejected_values_leave_record_unchanged(self, value):
        original = Full(foo=3)
        outcome = original.put("foo", value)
        assert outcome.is_err()
        assert outcome.reason == ":foo must be positive"
        assert original == Full(foo=3)
