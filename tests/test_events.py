import json

from conftest import make_record
from prospectfinder.core.analysis import NO_ISSUES, Lead, WebsiteAnalysis, WebsiteStatus
from prospectfinder.core.events import CompleteEvent, ErrorEvent, ProgressEvent, ResultEvent


def test_sse_frame_format():
    frame = ProgressEvent(message="Searching Google Maps...").to_sse()
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    assert json.loads(frame[len("data: "):]) == {"type": "progress", "message": "Searching Google Maps..."}


def test_only_complete_and_error_are_terminal():
    lead = Lead(record=make_record("x"), analysis=WebsiteAnalysis(WebsiteStatus.GOOD_QUALITY, 80, ()))
    assert not ProgressEvent(message="m").is_terminal
    assert not ResultEvent.for_lead(lead).is_terminal
    assert CompleteEvent().is_terminal
    assert ErrorEvent().is_terminal


def test_analysis_clamps_score_and_never_has_empty_issues():
    high = WebsiteAnalysis(WebsiteStatus.GOOD_QUALITY, 140, [])
    low = WebsiteAnalysis(WebsiteStatus.LOW_QUALITY, -12, ["No HTTPS"])
    assert high.score == 100
    assert high.issues == (NO_ISSUES,)
    assert low.score == 0
    assert low.issues == ("No HTTPS",)
