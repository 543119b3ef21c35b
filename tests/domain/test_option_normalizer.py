"""Tests for the option normalizer."""

import pytest

from otrs_bridge.domain.errors import ValidationError
from otrs_bridge.domain.services.option_normalizer import (
    REQUIRED_OPTIONS,
    event_info_from_options,
    normalize_options,
    resolve_problem_id,
    sanitize_problem_id,
)


class TestProblemIdSanitizing:
    def test_digits_kept(self):
        assert sanitize_problem_id("42") == 42

    def test_non_digits_stripped(self):
        assert sanitize_problem_id("$42x") == 42
        assert sanitize_problem_id(" 4-2 ") == 42

    def test_empty_is_zero(self):
        assert sanitize_problem_id("") == 0
        assert sanitize_problem_id(None) == 0
        assert sanitize_problem_id("$HOSTPROBLEMID$") == 0

    def test_sanitized_in_record(self, raw_options):
        raw_options["problem_id"] = "id:77"
        invocation = normalize_options(raw_options)
        assert invocation.event.problem_id == 77


class TestProblemIdFallback:
    @pytest.mark.parametrize(
        "problem_id,problem_id_last,expected",
        [
            (0, 5, 5),
            (0, 0, 0),
            (3, 5, 3),
            (3, 0, 3),
        ],
    )
    def test_resolve(self, problem_id, problem_id_last, expected):
        assert resolve_problem_id(problem_id, problem_id_last) == expected

    def test_zero_problem_id_uses_last(self, raw_options):
        raw_options["problem_id"] = "0"
        raw_options["problem_id_last"] = "41"
        event = normalize_options(raw_options).event
        assert event.problem_id == 41
        assert event.problem_id_last == 41

    def test_absent_problem_id_uses_last(self, raw_options):
        del raw_options["problem_id"]
        raw_options["problem_id_last"] = "41"
        assert normalize_options(raw_options).event.problem_id == 41

    def test_nonzero_problem_id_kept(self, raw_options):
        raw_options["problem_id_last"] = "41"
        assert normalize_options(raw_options).event.problem_id == 42

    def test_zero_without_fallback_is_missing(self, raw_options):
        raw_options["problem_id"] = "0"
        with pytest.raises(ValidationError) as exc_info:
            normalize_options(raw_options)
        assert exc_info.value.missing == ("problem_id",)


class TestEventDesc:
    def test_placeholder_cleared(self, raw_options):
        raw_options["event_desc"] = "$ $"
        assert normalize_options(raw_options).event.service_desc == ""

    def test_real_desc_kept(self, raw_options):
        assert normalize_options(raw_options).event.service_desc == "disk"

    def test_desc_optional(self, raw_options):
        del raw_options["event_desc"]
        assert normalize_options(raw_options).event.service_desc == ""


class TestTargetState:
    def test_recovery_defaults_to_recovered(self, raw_options):
        raw_options["event_type"] = "RECOVERY"
        assert normalize_options(raw_options).event.target_state == "recovered"

    def test_acknowledgement_defaults_to_aberto(self, raw_options):
        raw_options["event_type"] = "ACKNOWLEDGEMENT"
        assert normalize_options(raw_options).event.target_state == "Aberto"

    def test_unknown_event_type_has_no_state(self, raw_options):
        assert normalize_options(raw_options).event.target_state == ""

    def test_explicit_state_wins(self, raw_options):
        raw_options["event_type"] = "RECOVERY"
        raw_options["otrs_state"] = "closed successful"
        assert normalize_options(raw_options).event.target_state == "closed successful"

    def test_injected_table(self, raw_options):
        raw_options["event_type"] = "FLAPPINGSTART"
        invocation = normalize_options(raw_options, {"FLAPPINGSTART": "pending"})
        assert invocation.event.target_state == "pending"


class TestValidation:
    def test_valid_options(self, raw_options):
        invocation = normalize_options(raw_options)
        assert invocation.event.host_name == "web1"
        assert invocation.event.host_address == "10.0.0.1"
        assert invocation.credentials.user == "nagios"
        assert invocation.credentials.password == "s3cret"
        assert invocation.server.host == "otrs.example.com"
        assert invocation.server.port == 80

    def test_reports_every_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_options({})
        assert exc_info.value.missing == REQUIRED_OPTIONS
        assert len(exc_info.value.missing) == 10

    def test_reports_only_missing_fields(self, raw_options):
        del raw_options["event_host"]
        raw_options["otrs_pass"] = ""
        raw_options["event_output"] = None
        with pytest.raises(ValidationError) as exc_info:
            normalize_options(raw_options)
        assert exc_info.value.missing == ("event_host", "event_output", "otrs_pass")

    def test_message_lists_fields(self, raw_options):
        del raw_options["event_state"]
        with pytest.raises(ValidationError, match="event_state"):
            normalize_options(raw_options)

    def test_invalid_server_port(self, raw_options):
        raw_options["otrs_server"] = "otrs.example.com:http"
        with pytest.raises(ValidationError) as exc_info:
            normalize_options(raw_options)
        assert "otrs_server" in exc_info.value.invalid
        assert exc_info.value.missing == ()

    def test_raw_mapping_not_mutated(self, raw_options):
        raw_options["problem_id"] = "0"
        raw_options["problem_id_last"] = "41"
        raw_options["event_desc"] = "$ $"
        snapshot = dict(raw_options)
        normalize_options(raw_options)
        assert raw_options == snapshot

    def test_overrides_carried(self, raw_options):
        raw_options.update({
            "otrs_queue": "Ops",
            "otrs_priority": "5",
            "otrs_type": "Problem",
            "otrs_service": "Web",
            "otrs_customer": "noc",
        })
        overrides = normalize_options(raw_options).event.overrides
        assert overrides.queue == "Ops"
        assert overrides.priority == "5"
        assert overrides.type == "Problem"
        assert overrides.service == "Web"
        assert overrides.customer == "noc"


class TestEventInfoFromOptions:
    def test_incomplete_options_rendered(self):
        info = event_info_from_options({"event_host": "web1", "problem_id_last": "7"})
        assert info["EventHostName"] == "web1"
        assert info["ProblemID"] == "7"
        assert info["EventType"] == ""

    def test_sorted_names(self, raw_options):
        info = event_info_from_options(raw_options)
        assert list(info) == sorted(info)
