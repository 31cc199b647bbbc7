"""
Tests for the heuristic ranker.

Test Strategy
-------------
- Relative ordering only: exact market beats broad, topic match beats none
- Sorting is stable so equal scores keep corpus order
- Relevance counts only keyword hits, non-misc topic matches and close text
"""

import pytest

from qcbuddy.core.config.retrieval import RankingWeights
from qcbuddy.core.models import Market, MarketPreference, Topic
from qcbuddy.retrieval.ranker import Ranker, rank


@pytest.fixture
def corpus(make_chunk):
    return [
        make_chunk("Item names should use Title Case and avoid emojis.", topic=Topic.WRITING),
        make_chunk(
            "In the UAE you can add up to 3 cuisine tags per restaurant.",
            market=Market.AE,
            topic=Topic.TAGS,
        ),
        make_chunk("Hero images must be 1125x780 pixels.", topic=Topic.IMAGES),
        make_chunk("Delivery zones must follow the radius plan.", topic=Topic.ZONES),
    ]


@pytest.mark.unit
class TestMarketSignal:
    def test_exact_market_beats_all(self, make_chunk):
        text = "Add up to 3 cuisine tags per restaurant."
        broad = make_chunk(text, title="ALL", market=Market.ALL, topic=Topic.TAGS)
        exact = make_chunk(text, title="JO", market=Market.JO, topic=Topic.TAGS)

        ranked = rank("how many cuisine tags", [broad, exact], MarketPreference.JO)

        assert ranked[0].chunk is exact
        assert ranked[0].score > ranked[1].score

    def test_auto_query_gets_broad_bonus(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("cuisine tags", "AUTO")
        signals = ranker.signals(query, make_chunk("Tags.", market=Market.AE))
        assert signals["market"] == RankingWeights().market_broad

    def test_other_market_gets_nothing(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("cuisine tags", "JO")
        signals = ranker.signals(query, make_chunk("Tags.", market=Market.AE))
        assert signals["market"] == 0.0


@pytest.mark.unit
class TestTopicSignal:
    def test_topic_match_ranks_higher(self, make_chunk):
        text = "Use the approved size for every upload."
        misc = make_chunk(text, title="misc", topic=Topic.MISC)
        images = make_chunk(text, title="images", topic=Topic.IMAGES)

        ranked = rank("hero image size", [misc, images])

        assert ranked[0].chunk is images
        assert ranked[0].score > ranked[1].score

    def test_misc_question_favours_misc_chunk(self, make_chunk):
        text = "Keep listings consistent across the brand."
        images = make_chunk(text, title="images", topic=Topic.IMAGES)
        misc = make_chunk(text, title="misc", topic=Topic.MISC)

        ranker = Ranker()
        assert ranker.prepare("what about branch consistency", "AUTO").topic is Topic.MISC
        ranked = ranker.rank("what about branch consistency", [images, misc])

        assert ranked[0].chunk is misc
        assert ranked[0].score > ranked[1].score


@pytest.mark.unit
class TestRanking:
    def test_hero_question_finds_hero_rule(self, corpus):
        ranked = rank("What size should hero images be?", corpus)
        assert ranked[0].chunk.text == "Hero images must be 1125x780 pixels."
        assert corpus[2] in [r.chunk for r in ranked[:3]]

    def test_all_chunks_returned(self, corpus):
        assert len(rank("anything", corpus)) == len(corpus)

    def test_ties_keep_corpus_order(self, make_chunk):
        first = make_chunk("Same rule text.", title="first")
        second = make_chunk("Same rule text.", title="second")

        ranked = rank("unrelated question", [first, second])

        assert ranked[0].score == ranked[1].score
        assert [r.chunk.title for r in ranked] == ["first", "second"]

    def test_score_is_sum_of_signals(self, corpus):
        ranker = Ranker()
        query = ranker.prepare("hero images", MarketPreference.AE)
        for chunk in corpus:
            assert ranker.score(query, chunk).score == sum(ranker.signals(query, chunk).values())

    def test_stop_words_ignored(self):
        query = Ranker().prepare("What is the size of the hero image?", "AUTO")
        assert query.tokens == {"size", "hero", "image"}

    def test_shape_bonuses(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("x", "AUTO")
        w = RankingWeights()
        assert ranker.signals(query, make_chunk("You must crop."))["shape"] == (
            w.terminal_punct_bonus + w.policy_keyword_bonus
        )
        assert ranker.signals(query, make_chunk("crop"))["shape"] == 0.0

    def test_custom_weights(self, make_chunk):
        weights = RankingWeights(market_exact=0.0, market_broad=0.0)
        ranked = rank("x", [make_chunk("y", market=Market.AE)], "AE", weights=weights)
        ranker = Ranker(weights)
        query = ranker.prepare("x", "AE")
        assert ranker.signals(query, ranked[0].chunk)["market"] == 0.0

    def test_hero_banner_question(self, corpus):
        ranked = rank("what size should the hero banner be", corpus)
        assert corpus[2] in [r.chunk for r in ranked[:3]]


@pytest.mark.unit
class TestRelevance:
    def test_keyword_and_topic_count(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("hero images", "AUTO")
        chunk = make_chunk("Hero images must be 1125x780 pixels for every store.", topic=Topic.IMAGES)
        w = RankingWeights()
        assert ranker.score(query, chunk).relevance == 2 * w.keyword_weight + w.topic_match

    def test_unrelated_question_has_no_relevance(self, corpus):
        for scored in rank("qqqq", corpus):
            assert scored.relevance == 0.0
            assert scored.score > 0.0

    def test_short_nonsense_against_short_chunk(self, make_chunk):
        assert rank("qqqq", [make_chunk("Tags.")])[0].relevance == 0.0

    def test_misc_topic_match_is_not_evidence(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("qqqq", "AUTO")
        chunk = make_chunk("Branch names must be consistent across all listings.", topic=Topic.MISC)
        assert ranker.signals(query, chunk)["topic"] == RankingWeights().topic_match
        assert ranker.score(query, chunk).relevance == 0.0

    def test_near_identical_text_counts_lexically(self, make_chunk):
        ranker = Ranker()
        query = ranker.prepare("what is this", "AUTO")
        assert query.tokens == set()
        chunk = make_chunk("What is this?")
        signals = ranker.signals(query, chunk)
        assert ranker.score(query, chunk).relevance == signals["lexical"] > 0
