"""Unit tests for document status values and transition policies"""

import pytest

from domain.processes.process_status import (
    ProcessStatus,
    DEFAULT_STATUS,
    TERMINAL_STATUSES,
    PermissiveTransitionPolicy,
    StrictTransitionPolicy,
    get_transition_policy,
    parse_status,
)


class TestStatusValues:
    def test_default_status_is_in_analysis(self):
        assert DEFAULT_STATUS is ProcessStatus.IN_ANALYSIS
        assert DEFAULT_STATUS.value == "Em Análise"

    def test_parse_known_and_unknown(self):
        assert parse_status("Completed") is ProcessStatus.COMPLETED
        assert parse_status("Done") is None
        assert parse_status(None) is None


class TestPermissivePolicy:
    """Any known status can follow any known status"""

    def test_terminal_status_can_be_left(self):
        policy = PermissiveTransitionPolicy()
        assert policy.can_transition(ProcessStatus.COMPLETED, ProcessStatus.PENDING) is True

    def test_allowed_from_lists_every_status(self):
        policy = PermissiveTransitionPolicy()
        assert policy.allowed_from(ProcessStatus.ARCHIVED) == list(ProcessStatus)


class TestStrictPolicy:
    """Nominal flow enforcement"""

    def test_nominal_flow(self):
        policy = StrictTransitionPolicy()
        assert policy.can_transition(ProcessStatus.IN_ANALYSIS, ProcessStatus.IN_PROGRESS) is True
        assert policy.can_transition(ProcessStatus.IN_PROGRESS, ProcessStatus.COMPLETED) is True

    def test_skipping_in_progress_is_rejected(self):
        policy = StrictTransitionPolicy()
        assert policy.can_transition(ProcessStatus.IN_ANALYSIS, ProcessStatus.COMPLETED) is False

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_states_only_allow_themselves(self, terminal):
        policy = StrictTransitionPolicy()
        assert policy.allowed_from(terminal) == [terminal]

    def test_same_status_is_accepted(self):
        policy = StrictTransitionPolicy()
        assert policy.can_transition(ProcessStatus.PENDING, ProcessStatus.PENDING) is True

    def test_custom_table(self):
        policy = StrictTransitionPolicy({ProcessStatus.PENDING: [ProcessStatus.ARCHIVED]})
        assert policy.can_transition(ProcessStatus.PENDING, ProcessStatus.ARCHIVED) is True
        assert policy.can_transition(ProcessStatus.PENDING, ProcessStatus.IN_PROGRESS) is False


class TestPolicyRegistry:
    def test_lookup_by_name(self):
        assert isinstance(get_transition_policy("permissive"), PermissiveTransitionPolicy)
        assert isinstance(get_transition_policy("STRICT"), StrictTransitionPolicy)

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown status transition policy"):
            get_transition_policy("lenient")
