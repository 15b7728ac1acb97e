"""Tests for the pattern library and task/key-point extraction (pure, no I/O)."""

from __future__ import annotations

import pytest

from voice_memo.analysis.extractor import (
    analyze,
    detect_priority,
    extract_context,
    extract_due_date,
    extract_key_points,
    extract_tags,
    format_tasks,
)
from voice_memo.analysis.models import AnalysisResult, ExtractedTask
from voice_memo.analysis.patterns import TASK_PATTERNS, obligation_vocabulary
from voice_memo.config import AnalysisSettings
from voice_memo.pipeline_config import Priority

URGENT_MEMO = "I need to call Bob tomorrow. This is urgent: send the report."

# ---------------------------------------------------------------------------
# Task discovery
# ---------------------------------------------------------------------------


class TestTaskExtraction:
    def test_obligation_and_urgent_marker(self) -> None:
        result = analyze(URGENT_MEMO)

        assert [t.text for t in result.tasks] == ["call Bob tomorrow.", "send the report."]
        first, second = result.tasks
        assert first.priority is Priority.NONE
        assert first.due_date == "tomorrow"
        assert second.priority is Priority.HIGH
        assert second.due_date is None

    def test_context_window_is_clamped(self) -> None:
        result = analyze(URGENT_MEMO)
        assert result.tasks[0].context == URGENT_MEMO

    def test_empty_transcript(self) -> None:
        assert analyze("") == AnalysisResult(tasks=[], key_points=[])

    def test_no_tasks_in_small_talk(self) -> None:
        assert analyze("Nice weather today. The coffee was good.").tasks == []

    def test_deterministic(self) -> None:
        text = "TODO: book flights. Remember to pack #travel. We must renew passports by May 3rd."
        assert analyze(text) == analyze(text)

    def test_duplicates_across_patterns_dropped(self) -> None:
        text = "TODO: call Alice. Later I said I need to CALL ALICE."
        tasks = analyze(text).tasks
        assert [t.text for t in tasks] == ["call Alice."]

    def test_repeated_reminders_deduplicated(self) -> None:
        text = "Remember to water the plants. Don't forget to water the plants."
        assert [t.text for t in analyze(text).tasks] == ["water the plants."]

    def test_texts_are_unique_case_insensitively(self) -> None:
        text = (
            "I need to send the memo. You have to send the memo. "
            "Task: Send The Memo. Action item: review budget."
        )
        texts = [t.text.lower() for t in analyze(text).tasks]
        assert len(texts) == len(set(texts))
        assert all(t.strip() for t in texts)

    def test_all_categories_detected(self) -> None:
        text = (
            "ASAP: fix the login bug.\n"
            "Todo: update the wiki.\n"
            "We have to hire a designer.\n"
            "Don't forget to renew the domain.\n"
            "By Friday, send the invoice.\n"
            "Assigned to Maria: prepare the slides.\n"
        )
        texts = [t.text for t in analyze(text).tasks]
        assert texts == [
            "fix the login bug.",
            "update the wiki.",
            "hire a designer.",
            "renew the domain.",
            "send the invoice.",
            "prepare the slides.",
        ]

    def test_deadline_task_keeps_raw_date(self) -> None:
        tasks = analyze("By Friday, send the invoice.").tasks
        assert tasks[0].due_date == "Friday"

    def test_task_without_terminator_at_end(self) -> None:
        tasks = analyze("we need to ship the beta").tasks
        assert [t.text for t in tasks] == ["ship the beta"]

    def test_tags_collected_from_task_text(self) -> None:
        tasks = analyze("I need to email @sam about #budget and #budget.").tasks
        assert tasks[0].tags == ("@sam", "#budget")

    def test_word_boundaries(self) -> None:
        # "mustard" and "tasks" must not trigger the obligation / marker patterns
        assert analyze("Pass the mustard please. Our tasks were fine.").tasks == []


class TestTaskKeywords:
    def test_default_keywords_map_to_builtin_obligations(self) -> None:
        assert obligation_vocabulary(AnalysisSettings().task_keywords) == [
            "need to",
            "have to",
            "must",
        ]

    def test_custom_keywords_replace_obligation_vocabulary(self) -> None:
        settings = AnalysisSettings(task_keywords=["gotta", "todo"])
        text = "I gotta fix the sink. I need to buy milk. Todo: call the plumber."
        texts = [t.text for t in analyze(text, settings).tasks]
        assert texts == ["fix the sink.", "call the plumber."]

    def test_empty_keyword_list_falls_back_to_builtins(self) -> None:
        assert obligation_vocabulary([]) == ["need to", "have to", "must"]

    def test_default_table_order(self) -> None:
        assert [p.category for p in TASK_PATTERNS] == [
            "priority",
            "marker",
            "obligation",
            "reminder",
            "deadline",
            "delegation",
        ]


# ---------------------------------------------------------------------------
# Enrichment helpers
# ---------------------------------------------------------------------------


class TestPriority:
    @pytest.mark.parametrize(
        ("span", "expected"),
        [
            ("urgent: send the report.", Priority.HIGH),
            ("need to fix this immediately.", Priority.HIGH),
            ("this is important, call the bank.", Priority.MEDIUM),
            ("need to reply soon.", Priority.MEDIUM),
            ("eventually clean the garage.", Priority.LOW),
            ("when possible, sort the photos.", Priority.LOW),
            ("need to call mom.", Priority.NONE),
        ],
    )
    def test_tiers(self, span: str, expected: Priority) -> None:
        assert detect_priority(span) is expected

    def test_high_checked_before_medium(self) -> None:
        assert detect_priority("important and critical") is Priority.HIGH


class TestDueDate:
    @pytest.mark.parametrize(
        ("span", "expected"),
        [
            ("by Friday, send the invoice.", "Friday"),
            ("call Bob tomorrow.", "tomorrow"),
            ("finish it next week.", "next week"),
            ("ship before next Monday.", "next Monday"),
            ("pay rent due 12/25.", "12/25"),
            ("file taxes by 4/15/2025.", "4/15/2025"),
            ("renew passports by March 3rd, 2025.", "March 3rd, 2025"),
            ("book the venue on Sept 9.", "Sept 9"),
        ],
    )
    def test_raw_phrase_kept(self, span: str, expected: str) -> None:
        assert extract_due_date(span) == expected

    def test_no_date(self) -> None:
        assert extract_due_date("call the plumber.") is None


class TestTagsAndContext:
    def test_order_of_first_appearance(self) -> None:
        assert extract_tags("@lee check #infra then #ops with @lee") == ("@lee", "#infra", "#ops")

    def test_email_is_not_a_mention(self) -> None:
        assert extract_tags("mail bob@example.com the notes") == ()

    def test_context_window(self) -> None:
        text = "a" * 300
        assert len(extract_context(text, 150)) == 200
        assert extract_context(text, 10) == "a" * 110
        assert extract_context(text, 290) == "a" * 110


# ---------------------------------------------------------------------------
# Key points
# ---------------------------------------------------------------------------


class TestKeyPoints:
    def test_indicator_sentences_kept_in_order(self) -> None:
        text = (
            "The main point is speed. We ate lunch. Note that the deadline moved.\n"
            "In summary, ship it. I want to highlight the risks!"
        )
        assert extract_key_points(text) == [
            "The main point is speed.",
            "Note that the deadline moved.",
            "In summary, ship it.",
            "I want to highlight the risks!",
        ]

    def test_no_indicators(self) -> None:
        assert extract_key_points("We ate lunch. It rained.") == []

    def test_duplicates_not_removed(self) -> None:
        text = "Primarily it works. Primarily it works."
        assert extract_key_points(text) == ["Primarily it works.", "Primarily it works."]


# ---------------------------------------------------------------------------
# Task formatting
# ---------------------------------------------------------------------------


class TestFormatTasks:
    task = ExtractedTask(
        text="send the report.",
        priority=Priority.HIGH,
        due_date="Friday",
        tags=("#work", "@ana"),
        context="This is   urgent:\nsend the report.",
    )

    def test_full_line_without_context(self) -> None:
        settings = AnalysisSettings(include_task_context=False)
        assert format_tasks([self.task], settings) == [
            "- [ ] send the report. [Priority: high] [Due: Friday] #work @ana"
        ]

    def test_context_sub_line(self) -> None:
        lines = format_tasks([self.task], AnalysisSettings())
        assert lines == [
            "- [ ] send the report. [Priority: high] [Due: Friday] #work @ana\n"
            "    - Context: This is urgent: send the report."
        ]

    def test_priority_and_dates_can_be_hidden(self) -> None:
        settings = AnalysisSettings(
            include_task_context=False,
            include_task_priority=False,
            include_task_dates=False,
        )
        assert format_tasks([self.task], settings) == ["- [ ] send the report. #work @ana"]

    def test_no_priority_suffix_for_none(self) -> None:
        plain = ExtractedTask(text="call mom.")
        assert format_tasks([plain], AnalysisSettings()) == ["- [ ] call mom."]

    def test_extraction_order_preserved(self) -> None:
        tasks = analyze(URGENT_MEMO).tasks
        lines = format_tasks(tasks, AnalysisSettings(include_task_context=False))
        assert lines == [
            "- [ ] call Bob tomorrow. [Due: tomorrow]",
            "- [ ] send the report. [Priority: high]",
        ]
