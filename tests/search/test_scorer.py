"""Tests for entry scoring."""

import pytest

from clinic_kb.search import scorer
from clinic_kb.search.lexicon import DEFAULT_LEXICON
from clinic_kb.search.scorer import (
    CROSS_LOCALE_PENALTY,
    REASON_CROSS_LOCALE,
    REASON_DENTAL_TERM,
    REASON_TAG_EXACT,
    REASON_TAG_PARTIAL,
    REASON_TITLE_OVERLAP,
    score_corpus,
    score_entry,
)
from clinic_kb.search.synonyms import expand_tokens
from clinic_kb.search.text import tokenize
from tests.conftest import make_entry


def _expand(text: str):
    return expand_tokens(tokenize(text, DEFAULT_LEXICON.stopwords), DEFAULT_LEXICON)


def test_tag_exact_match():
    entry = make_entry(tags=["root-canal"], title="Treatment guide")
    result = score_entry(entry, _expand("root canal"), DEFAULT_LEXICON)
    assert result is not None
    assert result.score == 1.0
    assert result.reasons[0] == REASON_TAG_EXACT
    assert REASON_DENTAL_TERM in result.reasons
    assert result.tag_overlap == 1
    assert result.domain_gate


def test_tag_partial_match():
    entry = make_entry(tags=["parking-garage"], title="Getting here")
    result = score_entry(entry, _expand("parking"), DEFAULT_LEXICON)
    assert result is not None
    assert result.score == 1.0
    assert result.reasons == [REASON_TAG_PARTIAL]


def test_title_overlap_only():
    entry = make_entry(tags=["hours"], title="Clinic opening hours on weekends")
    result = score_entry(entry, _expand("weekends"), DEFAULT_LEXICON)
    assert result is not None
    assert result.score == pytest.approx(0.9)
    assert result.reasons == [REASON_TITLE_OVERLAP]
    assert result.title_overlap == 1


def test_tag_beats_title():
    entry = make_entry(tags=["implant"], title="Implant aftercare")
    result = score_entry(entry, _expand("implant"), DEFAULT_LEXICON)
    assert result is not None
    assert result.score == 1.0
    assert REASON_TITLE_OVERLAP not in result.reasons


def test_domain_gate_blocks_body_only_match():
    entry = make_entry(tags=["hours"], title="Opening times", body="We are closed on holidays")
    assert score_entry(entry, _expand("holidays"), DEFAULT_LEXICON) is None


def test_body_match_contributes_nothing_under_cap():
    entry = make_entry(tags=["hours"], title="Opening times", body="Implant consultations daily")
    # Gate opens through the dental term, but only the body mentions it
    result = score_entry(entry, _expand("implant"), DEFAULT_LEXICON)
    assert result is None


def test_body_match_cap_is_configurable(monkeypatch):
    monkeypatch.setattr(scorer, "BODY_MATCH_CAP", 0.5)
    entry = make_entry(tags=["hours"], title="Opening times", body="Implant consultations daily")
    result = score_entry(entry, _expand("implant"), DEFAULT_LEXICON)
    assert result is not None
    assert 0 < result.score <= 0.5
    assert result.reasons[0] == scorer.REASON_BODY_MATCH


def test_cross_locale_penalty():
    entry = make_entry(tags=["implant"])
    query = _expand("implant")
    same = score_entry(entry, query, DEFAULT_LEXICON)
    penalized = score_entry(entry, query, DEFAULT_LEXICON, penalty=CROSS_LOCALE_PENALTY)
    assert same is not None and penalized is not None
    assert penalized.score == pytest.approx(same.score * CROSS_LOCALE_PENALTY)
    assert penalized.score < same.score
    assert penalized.reasons[-1] == REASON_CROSS_LOCALE


def test_tag_filter_excludes_entry():
    entry = make_entry(tags=["implant"])
    query = _expand("implant")
    assert score_entry(entry, query, DEFAULT_LEXICON, tag_filter=frozenset({"pricing"})) is None
    assert score_entry(entry, query, DEFAULT_LEXICON, tag_filter=frozenset({"implant"})) is not None


def test_stopword_query_scores_nothing():
    entries = [make_entry(entry_id=f"e{i}", tags=["hours"], title="Opening hours") for i in "abc"]
    assert score_corpus(entries, _expand("what is the"), DEFAULT_LEXICON) == []


def test_score_corpus_drops_zero_scores():
    entries = [
        make_entry(entry_id="a", tags=["implant"]),
        make_entry(entry_id="b", tags=["hours"], title="Opening hours"),
    ]
    results = score_corpus(entries, _expand("implant"), DEFAULT_LEXICON)
    assert [r.entry.id for r in results] == ["a"]


def test_candidate_hook_sees_every_candidate():
    traces = []
    entries = [
        make_entry(entry_id="a", tags=["implant"]),
        make_entry(entry_id="b", tags=["hours"], title="Opening hours"),
    ]
    score_corpus(entries, _expand("implant"), DEFAULT_LEXICON, on_candidate=traces.append)
    assert [t.entry_id for t in traces] == ["a", "b"]
    assert traces[0].score == 1.0
    assert traces[1].score == 0.0
    assert traces[1].domain_gate
    assert "种植牙" in traces[0].tokens


def test_tie_within_epsilon_merges_reasons():
    best = scorer._BestScore()
    best.offer(0.9, "first")
    best.offer(0.9 + scorer.TIE_EPSILON / 2, "second")
    best.offer(0.5, "weaker")
    assert best.score == pytest.approx(0.9)
    assert best.reasons == ["first", "second"]


def test_strictly_better_score_replaces_reasons():
    best = scorer._BestScore()
    best.offer(0.9, "first")
    best.offer(1.0, "second")
    assert best.score == 1.0
    assert best.reasons == ["second"]


def test_body_not_tokenized_while_capped_at_zero(monkeypatch):
    seen = []

    def recording_tokenize(text, stopwords=frozenset()):
        seen.append(text)
        return tokenize(text, stopwords)

    monkeypatch.setattr(scorer, "tokenize", recording_tokenize)
    entry = make_entry(tags=["implant"], title="Implant costs", excerpt="Prices", body="Per tooth")
    result = score_entry(entry, _expand("implant"), DEFAULT_LEXICON)
    assert result is not None
    assert seen == ["Implant costs"]
