"""Global test configuration.

Shared option fixtures mirroring what a Nagios service notification passes
on the command line.
"""

import pytest


@pytest.fixture
def raw_options():
    """A complete, valid option set for a PROBLEM notification."""
    return {
        "otrs_user": "nagios",
        "otrs_pass": "s3cret",
        "otrs_server": "otrs.example.com:80",
        "problem_id": "42",
        "problem_id_last": "0",
        "event_type": "PROBLEM",
        "event_date": "Mon Jan 1 00:00:00 UTC 2024",
        "event_host": "web1",
        "event_addr": "10.0.0.1",
        "event_desc": "disk",
        "event_state": "CRITICAL",
        "event_output": "DISK CRITICAL - free space: / 12 MB (1%)",
    }
