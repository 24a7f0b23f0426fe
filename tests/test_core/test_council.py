"""Tests for the document-level council run."""

from unittest.mock import Mock, patch

import pytest

from legal_council.core.cache import VerdictCache
from legal_council.core.council import (
    ModelCouncil,
    aggregate_verdicts,
    mean_confidence,
    run_council,
    to_page_images,
)
from legal_council.core.state import MemoryStorage
from legal_council.core.vlm_client import RateLimitedError
from legal_council.schemas.common import AgentResult, CouncilVerdict, PageImage

PAGES = [b"\x89PNG page one", b"\x89PNG page two", b"\x89PNG page three"]


def echo_page(prompt: str) -> dict:
    """Flash response that translates the page label it was given."""
    for number in ("1", "2", "3"):
        if f"Page {number} of" in prompt:
            return {"translation": f"translation {number}", "isComplex": False}
    return {"translation": "?", "isComplex": False}


def make_verdict(confidence: int, text: str = "t", agent: str = "Agent Flash") -> CouncilVerdict:
    result = AgentResult(agent, "m", "src", text, 85, "n")
    return CouncilVerdict(text, (result, result), f"reason {text}", confidence)


@pytest.fixture
def council(client_factory, vlm_config, council_config):
    def build(client):
        return ModelCouncil.create(
            client, vlm_config, cache=VerdictCache(MemoryStorage()), config=council_config
        )
    return build


class TestAggregation:
    """Test document assembly from page verdicts."""

    def test_markers_in_page_order(self):
        verdicts = [make_verdict(90, "one"), make_verdict(90, "two")]

        document = aggregate_verdicts(verdicts)

        assert document.final_translation == (
            "--- Page 1 of 2 ---\none\n\n--- Page 2 of 2 ---\ntwo"
        )
        assert document.judge_reasoning == "[Page 1]: reason one\n\n[Page 2]: reason two"

    def test_mean_confidence(self):
        verdicts = [make_verdict(90), make_verdict(100), make_verdict(80)]
        assert mean_confidence(verdicts) == 90

    def test_mean_confidence_rounds_half_up(self):
        assert mean_confidence([make_verdict(90), make_verdict(91)]) == 91
        assert mean_confidence([make_verdict(88), make_verdict(89), make_verdict(89)]) == 89

    def test_provenance_is_first_page(self):
        first = make_verdict(90, "one", agent="First")
        second = make_verdict(90, "two", agent="Second")

        document = aggregate_verdicts([first, second])

        assert document.agent_results == first.agent_results


class TestPageNormalization:
    """Test conversion of inputs to PageImage."""

    def test_bytes_get_dense_indices(self):
        pages = to_page_images([b"a", b"b"])
        assert [p.index for p in pages] == [1, 2]

    def test_page_images_pass_through(self):
        pages = [PageImage(1, b"a"), PageImage(2, b"b")]
        assert to_page_images(pages) == pages

    def test_gap_in_indices_rejected(self):
        with pytest.raises(ValueError, match="dense"):
            to_page_images([PageImage(1, b"a"), PageImage(3, b"b")])

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError):
            to_page_images(["not bytes"])


class TestModelCouncilRun:
    """Test the sequential page loop."""

    def test_three_pages_in_order(self, council, client_factory):
        client = client_factory(flash=echo_page)

        verdict = council(client).run(PAGES, "Hindi")

        assert verdict.final_translation == (
            "--- Page 1 of 3 ---\ntranslation 1\n\n"
            "--- Page 2 of 3 ---\ntranslation 2\n\n"
            "--- Page 3 of 3 ---\ntranslation 3"
        )
        assert verdict.confidence_score == 90
        assert client.count("flash") == 3

    def test_pages_processed_sequentially(self, council, client_factory):
        client = client_factory(flash=echo_page)

        council(client).run(PAGES, "Hindi")

        labels = [c["prompt"] for c in client.calls]
        assert "Page 1 of 3" in labels[0]
        assert "Page 2 of 3" in labels[1]
        assert "Page 3 of 3" in labels[2]
        assert [c["images"] for c in client.calls] == [[p] for p in PAGES]

    def test_mixed_pages_average_confidence(self, council, client_factory):
        # Page 2 escalates, judge reports 100
        client = client_factory(
            flash=lambda prompt: {"translation": "f", "isComplex": "Page 2 of" in prompt},
            judge={"finalTranslation": "j", "confidenceScore": 100},
        )

        verdict = council(client).run(PAGES[:2], "Hindi")

        assert verdict.confidence_score == 95
        assert verdict.agent_results[0].agent_name == "Agent Flash"
        assert verdict.agent_results[1].agent_name == "Agent Flash"

    def test_empty_document_rejected(self, council, client_factory):
        client = client_factory()

        with pytest.raises(ValueError):
            council(client).run([], "Hindi")

        assert client.calls == []

    def test_duplicate_pages_served_from_cache(self, council, client_factory):
        client = client_factory()
        messages = []

        council(client).run([b"same", b"same"], "Hindi", messages.append)

        assert client.count("flash") == 1
        assert "Page 2 of 2 - Served from cache (instant)" in messages

    def test_second_run_makes_no_calls(self, council, client_factory):
        client = client_factory(flash=echo_page)
        model_council = council(client)

        first = model_council.run(PAGES, "Hindi")
        calls = len(client.calls)
        second = model_council.run(PAGES, "Hindi")

        assert len(client.calls) == calls
        assert second == first

    def test_exhausted_retries_abort_run(self, council, client_factory):
        client = client_factory(
            flash=lambda prompt: (
                RateLimitedError("429", 429) if "Page 2 of" in prompt
                else {"translation": "ok", "isComplex": False}
            )
        )

        with patch("legal_council.core.retry.time.sleep"):
            with pytest.raises(RateLimitedError):
                council(client).run(PAGES, "Hindi")

        # 1 call for page 1, 4 attempts for page 2, page 3 never reached
        assert client.count("flash") == 5
        assert not any("Page 3 of 3" in c["prompt"] for c in client.calls)

    def test_cooldown_between_pages(self, client_factory, vlm_config, council_config):
        from dataclasses import replace

        config = replace(council_config, page_cooldown_s=0.5)
        model_council = ModelCouncil.create(client_factory(), vlm_config, config=config)

        with patch("legal_council.core.council.time.sleep") as mock_sleep:
            model_council.run(PAGES, "Hindi")

        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.5)

    def test_status_messages(self, council, client_factory):
        messages = []

        council(client_factory()).run(PAGES[:1], "Hindi", messages.append)

        assert messages == [
            "Page 1 of 1 - Agent Flash scanning...",
            "Page 1 of 1 - Translation complete",
            "Assembling 1-page translation...",
            "All pages translated. Council adjourned.",
        ]

    def test_failing_sink_does_not_abort(self, council, client_factory):
        sink = Mock(side_effect=RuntimeError("UI gone"))

        verdict = council(client_factory()).run(PAGES, "Hindi", sink)

        assert verdict.confidence_score == 90
        assert sink.call_count > 0


class TestRunCouncil:
    """Test the pipeline entry point."""

    def test_entry_point(self, client_factory, vlm_config, council_config):
        client = client_factory()
        cache = VerdictCache(MemoryStorage())

        verdict = run_council(
            PAGES[:2], "Spanish", None, client, vlm_config, cache=cache, config=council_config
        )

        assert verdict.final_translation.startswith("--- Page 1 of 2 ---\ntranslated")
        assert client.calls[0]["model"] == vlm_config.flash_model
        assert "Spanish" in client.calls[0]["prompt"]

    def test_shared_cache_across_runs(self, client_factory, vlm_config, council_config):
        client = client_factory()
        cache = VerdictCache(MemoryStorage())

        run_council(PAGES[:1], "Hindi", None, client, vlm_config, cache=cache, config=council_config)
        run_council(PAGES[:1], "Hindi", None, client, vlm_config, cache=cache, config=council_config)
        run_council(PAGES[:1], "French", None, client, vlm_config, cache=cache, config=council_config)

        assert client.count("flash") == 2
