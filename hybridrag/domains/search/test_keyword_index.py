"""
Tests for the tokenizer and BM25 keyword index.
"""

from __future__ import annotations

import asyncio
import math

import pytest

from hybridrag.domains.ingestion.models import Chunk

from .keyword_index import InMemoryKeywordIndex, tokenize


def make_chunk(chunk_id: str, text: str, **kwargs) -> Chunk:
    return Chunk(id=chunk_id, document_id="d", chunk_index=0, text=text, **kwargs)


@pytest.fixture
def index() -> InMemoryKeywordIndex:
    return InMemoryKeywordIndex()


# --- tokenize ---


def test_tokenize_lowercases_and_drops_stop_words() -> None:
    assert tokenize("The Escrow shortage, is an ESCROW issue!") == [
        "escrow",
        "shortage",
        "escrow",
        "issue",
    ]


def test_tokenize_drops_short_tokens() -> None:
    assert tokenize("ab cd efg") == ["efg"]


def test_tokenize_blank() -> None:
    assert tokenize("") == []
    assert tokenize("   ") == []


# --- Indexing ---


async def test_average_length_is_recomputed(index):
    await index.index([make_chunk("a", "alpha beta gamma")])
    assert index.avg_doc_length == 3.0

    await index.index([make_chunk("b", "delta epsilon")])
    assert index.avg_doc_length == 2.5


async def test_reindex_is_idempotent(index):
    chunk = make_chunk("a", "escrow shortage explained")
    await index.index([chunk])
    first = await index.search("escrow", top_k=5)

    await index.index([chunk])
    second = await index.search("escrow", top_k=5)

    assert index.size == 1
    assert index.document_frequency("escrow") == 1
    assert [r.score for r in first] == [r.score for r in second]


async def test_reindex_drops_stale_terms(index):
    """Test replacing a chunk removes postings for words it no longer has."""
    await index.index([make_chunk("a", "escrow shortage")])
    await index.index([make_chunk("a", "mortgage payment")])

    assert await index.search("escrow", top_k=5) == []
    assert index.document_frequency("escrow") == 0
    assert [r.chunk.id for r in await index.search("mortgage", top_k=5)] == ["a"]


async def test_title_keywords_and_summary_are_indexed(index):
    await index.index(
        [
            make_chunk("a", "nothing relevant", title="Escrow"),
            make_chunk("b", "nothing relevant", keywords=["insurance"]),
            make_chunk("c", "nothing relevant", summary="Property taxes rose."),
        ]
    )

    assert [r.chunk.id for r in await index.search("escrow", top_k=5)] == ["a"]
    assert [r.chunk.id for r in await index.search("insurance", top_k=5)] == ["b"]
    assert [r.chunk.id for r in await index.search("taxes", top_k=5)] == ["c"]


# --- Scoring ---


async def test_single_chunk_score_matches_bm25(index):
    """Test one term, one chunk: score reduces to idf when length equals average."""
    await index.index([make_chunk("a", "escrow shortage explained")])

    results = await index.search("escrow", top_k=5)

    assert results[0].score == pytest.approx(math.log(4 / 3))
    assert results[0].source == "keyword"


async def test_higher_term_frequency_never_lowers_score() -> None:
    once = InMemoryKeywordIndex()
    twice = InMemoryKeywordIndex()
    other = make_chunk("z", "unrelated content here")
    await once.index([make_chunk("a", "escrow filler words"), other])
    await twice.index([make_chunk("a", "escrow escrow words"), other])

    score_once = (await once.search("escrow", top_k=1))[0].score
    score_twice = (await twice.search("escrow", top_k=1))[0].score

    assert score_twice >= score_once


async def test_term_in_every_chunk_has_low_idf(index):
    await index.index(
        [
            make_chunk("a", "loan escrow"),
            make_chunk("b", "loan payment"),
            make_chunk("c", "loan insurance"),
        ]
    )

    common = index.idf("loan")
    rare = index.idf("escrow")

    assert common == pytest.approx(math.log(0.5 / 3.5 + 1))
    assert common < rare


async def test_unknown_terms_contribute_nothing(index):
    await index.index([make_chunk("a", "escrow shortage"), make_chunk("b", "late payment")])

    plain = await index.search("escrow", top_k=5)
    with_unknown = await index.search("escrow zebra", top_k=5)

    assert [(r.chunk.id, r.score) for r in plain] == [(r.chunk.id, r.score) for r in with_unknown]


async def test_chunks_without_query_terms_are_excluded(index):
    await index.index([make_chunk("a", "escrow shortage"), make_chunk("b", "late payment")])

    results = await index.search("escrow", top_k=5)

    assert [r.chunk.id for r in results] == ["a"]


async def test_ties_break_by_chunk_id(index):
    await index.index([make_chunk("b", "escrow account"), make_chunk("a", "escrow account")])

    results = await index.search("escrow", top_k=5)

    assert [r.chunk.id for r in results] == ["a", "b"]


async def test_top_k_limits_results(index):
    await index.index([make_chunk(f"c{i}", "escrow account") for i in range(5)])
    assert len(await index.search("escrow", top_k=2)) == 2


@pytest.mark.parametrize("query", ["", "   ", "the and of", "to be"])
async def test_queries_without_terms_return_nothing(index, query):
    await index.index([make_chunk("a", "escrow shortage")])
    assert await index.search(query, top_k=5) == []


async def test_search_empty_index(index):
    assert await index.search("escrow", top_k=5) == []


async def test_clear(index):
    await index.index([make_chunk("a", "escrow shortage")])
    await index.clear()
    assert index.size == 0
    assert index.avg_doc_length == 0.0


async def test_index_returns_replaced_versions(index):
    first = make_chunk("a", "escrow shortage")
    assert await index.index([first]) == []

    replaced = await index.index([make_chunk("a", "late payment"), make_chunk("b", "escrow")])

    assert replaced == [first]


async def test_remove_drops_postings_and_refreshes_stats(index):
    await index.index(
        [make_chunk("a", "escrow shortage explained"), make_chunk("b", "late payment")]
    )

    await index.remove(["a", "missing"])

    assert index.size == 1
    assert index.document_frequency("escrow") == 0
    assert index.avg_doc_length == pytest.approx(2.0)
    assert await index.search("escrow", top_k=5) == []
    assert [r.chunk.id for r in await index.search("late", top_k=5)] == ["b"]


async def test_concurrent_search_sees_whole_batches(index):
    """Test searches racing with writes see each batch entirely or not at all."""
    await index.index([make_chunk("base", "escrow account")])
    batches = [
        [make_chunk(f"b{n}-{i}", f"escrow shortage notice {i}") for i in range(25)]
        for n in range(3)
    ]

    async def matched_ids() -> set[str]:
        return {r.chunk.id for r in await index.search("escrow", top_k=100)}

    calls = []
    for batch in batches:
        calls += [matched_ids(), index.index(batch), matched_ids()]
    outcomes = await asyncio.gather(*calls)

    seen = [ids for ids in outcomes if isinstance(ids, set)]
    assert len(seen) == 6
    for ids in seen:
        assert "base" in ids
        for batch in batches:
            batch_ids = {c.id for c in batch}
            assert ids & batch_ids in (set(), batch_ids)
    assert {c.id for batch in batches for c in batch} <= seen[-1]
