"""
Tests for ComponentSequence (time query protocol).

Tests that ComponentSequence properly:
- Resolves its target lazily and re-resolves after id/document changes
- Selects the acting keyframe(s) for a query time
- Computes the interpolation fraction
- Reports change only when the state fingerprint changes
- Expires the target only when it changed and can be expired
"""

from unittest.mock import MagicMock

import pytest

from sequencer.engine.sequence import CameraSequence, ComponentSequence
from sequencer.models.enums import ObjectPhase, SequenceKind
from sequencer.models.errors import InvariantViolation, PreconditionViolation, TargetNotFoundError
from sequencer.models.keyframe import ComponentKeyframe, NO_STATE
from sequencer.services.memory_document import MemoryDocument, MemoryObject


def make_target(instance_id="obj-1", name="Target", phase=ObjectPhase.COMPUTED, is_active=True):
    target = MagicMock()
    target.instance_id = instance_id
    target.name = name
    target.phase = phase
    target.is_active = is_active
    return target


def make_document(*targets):
    doc = MagicMock()
    by_id = {t.instance_id: t for t in targets}
    doc.find_object.side_effect = lambda instance_id: by_id.get(instance_id)
    return doc


@pytest.fixture
def target():
    return make_target()


@pytest.fixture
def doc(target):
    return make_document(target)


@pytest.fixture
def two_keyframes(make_keyframe, target):
    """Sequence with keyframes at t=0 (fingerprint 111) and t=10 (fingerprint 222)."""
    a = make_keyframe(0.0, 111)
    b = make_keyframe(10.0, 222)
    seq = ComponentSequence(target.instance_id)
    seq.add_keyframe(b)
    seq.add_keyframe(a)
    return seq, a, b


class TestTargetResolution:

    def test_unbound_on_construction(self, doc, target):
        seq = ComponentSequence(target.instance_id, doc)
        assert not seq.is_bound
        assert seq.last_state_hash == NO_STATE
        doc.find_object.assert_not_called()

    def test_target_resolved_on_demand(self, doc, target):
        seq = ComponentSequence(target.instance_id, doc)
        assert seq.target is target
        assert seq.is_bound
        doc.find_object.assert_called_once_with(target.instance_id)

    def test_resolution_is_cached(self, doc, target, two_keyframes):
        seq, _, _ = two_keyframes
        seq.set_time(1.0, doc)
        seq.set_time(2.0, doc)
        seq.set_time(3.0, doc)
        doc.find_object.assert_called_once_with(target.instance_id)

    def test_missing_target_raises(self, two_keyframes):
        seq, _, _ = two_keyframes
        empty_doc = make_document()
        with pytest.raises(TargetNotFoundError) as excinfo:
            seq.set_time(1.0, empty_doc)
        assert excinfo.value.target_id == "obj-1"
        assert "obj-1" in str(excinfo.value)

    def test_target_not_found_is_a_key_error(self, two_keyframes):
        seq, _, _ = two_keyframes
        with pytest.raises(KeyError):
            seq.set_time(1.0, make_document())

    def test_no_document_raises(self, two_keyframes):
        seq, _, _ = two_keyframes
        with pytest.raises(TargetNotFoundError):
            seq.set_time(1.0, None)

    def test_target_id_change_forces_fresh_lookup(self, make_keyframe):
        first = make_target("first")
        second = make_target("second")
        doc = make_document(first, second)

        seq = ComponentSequence("first", doc)
        kf = make_keyframe(0.0, 111)
        seq.add_keyframe(kf)

        assert seq.set_time(0.0, doc) is True
        seq.target_id = "second"

        assert not seq.is_bound
        assert seq.set_time(0.0, doc) is True
        assert seq.target is second
        assert kf.calls[-1] == ("load", second)
        assert doc.find_object.call_count == 2

    def test_same_target_id_keeps_binding(self, doc, target):
        seq = ComponentSequence(target.instance_id, doc)
        _ = seq.target
        seq.target_id = target.instance_id
        assert seq.is_bound

    def test_document_change_forces_fresh_lookup(self, target, two_keyframes):
        seq, _, _ = two_keyframes
        old_doc = make_document(target)
        reloaded = make_target(target.instance_id)
        new_doc = make_document(reloaded)

        seq.set_time(0.0, old_doc)
        assert seq.target is target

        seq.set_time(0.0, new_doc)
        assert seq.target is reloaded
        new_doc.find_object.assert_called_once_with(target.instance_id)

    def test_rebinding_resets_fingerprint(self, target, two_keyframes):
        """Same state on a freshly resolved target still counts as a change."""
        seq, _, _ = two_keyframes
        old_doc = make_document(target)
        new_doc = make_document(make_target(target.instance_id))

        assert seq.set_time(0.0, old_doc) is True
        assert seq.set_time(0.0, new_doc) is True

    def test_name_from_target(self, doc, target):
        seq = ComponentSequence(target.instance_id, doc)
        assert seq.name == "Target"

    def test_name_fallback_when_unresolvable(self):
        seq = ComponentSequence("missing", make_document())
        assert seq.name == "Component"


class TestPreconditions:

    def test_empty_sequence_raises(self, doc, target):
        seq = ComponentSequence(target.instance_id, doc)
        with pytest.raises(PreconditionViolation):
            seq.set_time(0.0, doc)

    @pytest.mark.parametrize("time", [-100.0, 0.0, 42.0])
    def test_empty_sequence_never_returns_false(self, doc, target, time):
        seq = ComponentSequence(target.instance_id, doc)
        with pytest.raises(PreconditionViolation):
            seq.set_time(time, doc)
        target.expire_solution.assert_not_called()


class TestKeyframeSelection:

    def test_before_first_loads_first(self, doc, two_keyframes):
        seq, a, b = two_keyframes
        seq.set_time(-5.0, doc)
        assert [c[0] for c in a.calls] == ["load"]
        assert b.calls == []

    def test_at_first_loads_first(self, doc, two_keyframes):
        seq, a, _ = two_keyframes
        seq.set_time(0.0, doc)
        assert [c[0] for c in a.calls] == ["load"]

    def test_after_last_loads_last(self, doc, two_keyframes):
        seq, a, b = two_keyframes
        seq.set_time(20.0, doc)
        assert a.calls == []
        assert [c[0] for c in b.calls] == ["load"]

    def test_at_last_loads_last(self, doc, two_keyframes):
        seq, a, b = two_keyframes
        seq.set_time(10.0, doc)
        assert a.calls == []
        assert [c[0] for c in b.calls] == ["load"]

    @pytest.mark.parametrize("time,fraction", [(2.5, 0.25), (5.0, 0.5), (9.0, 0.9)])
    def test_between_interpolates_with_fraction(self, doc, two_keyframes, time, fraction):
        seq, a, b = two_keyframes
        seq.set_time(time, doc)

        kind, next_kf, got = a.calls[0]
        assert kind == "interpolate"
        assert next_kf is b
        assert got == pytest.approx(fraction)
        assert 0.0 <= got < 1.0
        assert b.calls == []

    def test_exactly_on_middle_keyframe_interpolates_from_it(self, doc, target, make_keyframe):
        k0, k1, k2 = make_keyframe(0.0, 1), make_keyframe(10.0, 2), make_keyframe(20.0, 3)
        seq = ComponentSequence(target.instance_id, doc)
        for kf in (k2, k0, k1):
            seq.add_keyframe(kf)

        seq.set_time(10.0, doc)

        assert k0.calls == []
        assert k1.calls == [("interpolate", k2, 0.0)]
        assert k2.calls == []

    def test_second_bracket(self, doc, target, make_keyframe):
        k0, k1, k2 = make_keyframe(0.0, 1), make_keyframe(10.0, 2), make_keyframe(20.0, 3)
        seq = ComponentSequence(target.instance_id, doc)
        for kf in (k0, k1, k2):
            seq.add_keyframe(kf)

        seq.set_time(15.0, doc)

        assert k1.calls == [("interpolate", k2, 0.5)]

    def test_single_application_per_call(self, doc, target, make_keyframe):
        kfs = [make_keyframe(float(t), t + 1) for t in range(5)]
        seq = ComponentSequence(target.instance_id, doc)
        for kf in kfs:
            seq.add_keyframe(kf)

        seq.set_time(2.5, doc)

        assert sum(len(kf.calls) for kf in kfs) == 1

    @pytest.mark.parametrize("time", [-10.0, 0.0, 3.0, 100.0])
    def test_single_keyframe_always_loads_exactly(self, doc, target, make_keyframe, time):
        only = make_keyframe(5.0, 555)
        seq = ComponentSequence(target.instance_id, doc)
        seq.add_keyframe(only)

        seq.set_time(time, doc)

        assert only.calls == [("load", target)]

    def test_replaced_keyframe_is_not_applied(self, doc, target, make_keyframe):
        old = make_keyframe(0.0, 1)
        new = make_keyframe(0.0, 2)
        seq = ComponentSequence(target.instance_id, doc)
        seq.add_keyframe(old)
        seq.add_keyframe(new)

        seq.set_time(0.0, doc)

        assert old.calls == []
        assert seq.last_state_hash == 2

    def test_unordered_keyframes_are_invariant_violation(self, target, make_keyframe):
        ordered = [make_keyframe(0.0, 1), make_keyframe(0.0, 2), make_keyframe(5.0, 3)]
        with pytest.raises(InvariantViolation):
            ComponentSequence._apply(1.0, target, ordered)


class TestFailedApplication:

    @pytest.fixture
    def failing_pair(self, make_keyframe):
        class FailingKeyframe(make_keyframe):
            def interpolate_state(self, target, next_keyframe, fraction):
                target.set_value("value", fraction)
                raise ValueError("host rejected value")

        return FailingKeyframe(0.0, 111), make_keyframe(10.0, 222)

    def test_error_propagates_and_resets_fingerprint(self, doc, target, failing_pair):
        first, second = failing_pair
        seq = ComponentSequence(target.instance_id, doc)
        seq.add_keyframe(first)
        seq.add_keyframe(second)
        seq.set_time(10.0, doc)

        with pytest.raises(ValueError):
            seq.set_time(5.0, doc)

        assert seq.last_state_hash == NO_STATE

    def test_next_call_reports_change_after_failure(self, doc, target, failing_pair):
        first, second = failing_pair
        seq = ComponentSequence(target.instance_id, doc)
        seq.add_keyframe(first)
        seq.add_keyframe(second)
        seq.set_time(10.0, doc)
        with pytest.raises(ValueError):
            seq.set_time(5.0, doc)
        target.expire_solution.reset_mock()

        assert seq.set_time(10.0, doc) is True
        target.expire_solution.assert_called_once_with(False)


class TestChangeDetection:

    def test_first_call_reports_change(self, doc, two_keyframes):
        seq, _, _ = two_keyframes
        assert seq.set_time(0.0, doc) is True
        assert seq.last_state_hash == 111

    def test_same_time_twice_is_idempotent(self, doc, two_keyframes):
        seq, _, _ = two_keyframes
        assert seq.set_time(4.0, doc) is True
        assert seq.set_time(4.0, doc) is False

    def test_different_times_same_fingerprint(self, doc, two_keyframes):
        """Both calls apply state, only the first reports a change."""
        seq, a, _ = two_keyframes
        assert seq.set_time(-5.0, doc) is True
        assert seq.set_time(-1.0, doc) is False
        assert len(a.calls) == 2

    def test_scenario_clamp_interpolate_clamp(self, doc, two_keyframes):
        seq, _, _ = two_keyframes
        assert seq.set_time(-5.0, doc) is True     # A exactly
        assert seq.set_time(5.0, doc) is True      # A→B at 0.5
        assert seq.set_time(20.0, doc) is True     # B exactly
        assert seq.set_time(20.0, doc) is False

    def test_interpolated_fingerprint_equal_to_previous(self, doc, target, make_keyframe):
        a = make_keyframe(0.0, 111, interpolated=111)
        b = make_keyframe(10.0, 222)
        seq = ComponentSequence(target.instance_id, doc)
        seq.add_keyframe(a)
        seq.add_keyframe(b)

        assert seq.set_time(0.0, doc) is True
        assert seq.set_time(5.0, doc) is False


class TestInvalidation:

    def test_change_expires_target(self, doc, target, two_keyframes):
        seq, _, _ = two_keyframes
        seq.set_time(0.0, doc)
        target.expire_solution.assert_called_once_with(False)

    def test_no_change_does_not_expire(self, doc, target, two_keyframes):
        seq, _, _ = two_keyframes
        seq.set_time(0.0, doc)
        seq.set_time(0.0, doc)
        target.expire_solution.assert_called_once_with(False)

    def test_blank_target_not_expired_but_change_reported(self, make_keyframe):
        blank = make_target(phase=ObjectPhase.BLANK)
        doc = make_document(blank)
        seq = ComponentSequence(blank.instance_id)
        seq.add_keyframe(make_keyframe(0.0, 1))

        assert seq.set_time(0.0, doc) is True
        blank.expire_solution.assert_not_called()

    def test_inactive_target_not_expired(self, make_keyframe):
        passive = make_target(is_active=False)
        doc = make_document(passive)
        seq = ComponentSequence(passive.instance_id)
        seq.add_keyframe(make_keyframe(0.0, 1))

        assert seq.set_time(0.0, doc) is True
        passive.expire_solution.assert_not_called()


class TestWithMemoryDocument:
    """End-to-end against the in-memory host and real ComponentKeyframes."""

    def test_values_follow_time(self, document, slider, slider_sequence):
        assert slider_sequence.set_time(-5.0, document) is True
        assert slider.get_value("value") == 0.0
        assert slider.get_value("label") == "start"

        document.solve()
        assert slider_sequence.set_time(5.0, document) is True
        assert slider.get_value("value") == pytest.approx(50.0)
        assert slider.get_value("label") == "start"

        document.solve()
        assert slider_sequence.set_time(20.0, document) is True
        assert slider.get_value("value") == 100.0
        assert slider.get_value("label") == "end"

        document.solve()
        assert slider_sequence.set_time(20.0, document) is False
        assert slider.expire_count == 3

    def test_expired_object_is_blank_until_solved(self, document, slider, slider_sequence):
        slider_sequence.set_time(1.0, document)
        assert slider.phase == ObjectPhase.BLANK

        # Changed again before the host solved: no second expire
        assert slider_sequence.set_time(2.0, document) is True
        assert slider.expire_count == 1

    def test_removed_object_raises(self, document, slider, slider_sequence):
        slider_sequence.set_time(1.0, document)

        reloaded = MemoryDocument("reloaded")
        with pytest.raises(TargetNotFoundError):
            slider_sequence.set_time(1.0, reloaded)

    def test_reload_with_same_id_reapplies(self, document, slider, slider_sequence):
        slider_sequence.set_time(5.0, document)

        reloaded = MemoryDocument("reloaded")
        copy = reloaded.add_object(MemoryObject("Slider", {"value": 0.0}, instance_id=slider.instance_id))

        assert slider_sequence.set_time(5.0, reloaded) is True
        assert copy.get_value("value") == pytest.approx(50.0)
        assert copy.expire_count == 1

    def test_name(self, slider_sequence):
        assert slider_sequence.name == "Slider"
        assert slider_sequence.kind == SequenceKind.COMPONENT


class TestCameraSequence:

    def test_never_reports_change(self, doc):
        cam = CameraSequence()
        cam.add_keyframe(ComponentKeyframe(0.0, {"fov": 40}))
        assert cam.set_time(0.0, doc) is False
        assert cam.set_time(5.0, None) is False

    def test_name_and_kind(self):
        cam = CameraSequence()
        assert cam.name == "Camera"
        assert cam.kind == SequenceKind.CAMERA

    def test_keyframe_bookkeeping_shared_with_base(self):
        cam = CameraSequence()
        cam.add_keyframe(ComponentKeyframe(1.0))
        cam.add_keyframe(ComponentKeyframe(1.0))
        assert cam.keyframe_count == 1
        assert not cam.is_empty
