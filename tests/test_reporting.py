"""Tests for console reporting."""

import io

import pytest

from cyclefinder.reporting import Reporter, Volume


def test_quiet_reporter_writes_nothing():
    stream = io.StringIO()
    reporter = Reporter(stream=stream)
    reporter.warn("found cycle imports")
    reporter.note("complete")
    reporter.debug("details")
    assert stream.getvalue() == ""


def test_normal_volume_writes_notes_and_warnings():
    stream = io.StringIO()
    reporter = Reporter(volume=Volume.normal, stream=stream)
    reporter.note("start analyze")
    reporter.warn("found cycle imports")
    reporter.info("not shown")
    output = stream.getvalue()
    assert "cyclefinder start analyze" in output
    assert "found cycle imports" in output
    assert "not shown" not in output


@pytest.mark.parametrize("volume", [Volume.quiet, Volume.normal, Volume.verbose])
def test_debug_only_at_debug_volume(volume):
    stream = io.StringIO()
    Reporter(volume=volume, stream=stream).debug("details")
    assert stream.getvalue() == ""


def test_debug_volume_shows_debug():
    stream = io.StringIO()
    Reporter(volume=Volume.debug, stream=stream).debug("details")
    assert "details" in stream.getvalue()


def test_timed_reports_elapsed_time():
    stream = io.StringIO()
    reporter = Reporter(volume=Volume.verbose, stream=stream)
    with reporter.timed("analysis"):
        pass
    assert "analysis took" in stream.getvalue()


def test_timed_reports_even_on_error():
    stream = io.StringIO()
    reporter = Reporter(volume=Volume.verbose, stream=stream)
    with pytest.raises(ValueError):
        with reporter.timed("analysis"):
            raise ValueError()
    assert "analysis took" in stream.getvalue()


def test_writes_to_stderr_by_default(capsys):
    Reporter(volume=Volume.normal).note("hello")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello" in captured.err
