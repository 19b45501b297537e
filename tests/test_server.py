"""End-to-end tests for the SearchServer public API."""

import math
from collections import Counter

import pytest

from search_server.document import DocumentStatus
from search_server.exceptions import InvalidArgumentError, OutOfRangeError
from search_server.server import SearchServer

PETS = [
    (2, "white cat and fashion collar", DocumentStatus.ACTUAL, [8, -3]),
    (7, "fluffy cat fluffy tail", DocumentStatus.ACTUAL, [7, 2, 7]),
    (9, "groomed dog expressive eyes", DocumentStatus.ACTUAL, [5, -12, 2, 1]),
    (10, "groomed starling evgen", DocumentStatus.BANNED, [9]),
    (13, "black penguin oswald with black collar", DocumentStatus.REMOVED, [7, 3, 8]),
    (15, "black bat wayne with black ears", DocumentStatus.REMOVED, [-3, 8, 4]),
    (16, "red spider peter with black abdomen", DocumentStatus.IRRELEVANT, [2, 1, 6]),
]

CITY = [
    (2, "cat in the city", DocumentStatus.ACTUAL, [3, 1, -1]),
    (7, "porco rosso the crimson pig on a plane", DocumentStatus.ACTUAL, [2, 5, 6]),
    (9, "black cat kyle", DocumentStatus.ACTUAL, [-3, 2, 8]),
]


def make_server(stop_words, documents):
    server = SearchServer(stop_words)
    for document_id, text, status, ratings in documents:
        server.add_document(document_id, text, status, ratings)
    return server


def ids(documents):
    return [document.id for document in documents]


@pytest.fixture
def pets():
    return make_server("and in on the with", PETS)


@pytest.fixture
def city():
    return make_server("and in on the", CITY)


class TestStopWords:
    def test_stop_word_in_document_is_not_indexed(self):
        server = SearchServer()
        server.add_document(42, "cat in the city", DocumentStatus.ACTUAL, [1, 2, 3])
        assert ids(server.find_top_documents("in")) == [42]

        server = SearchServer("in the")
        server.add_document(42, "cat in the city", DocumentStatus.ACTUAL, [1, 2, 3])
        assert server.find_top_documents("in") == []

    def test_single_document_scenario(self):
        server = SearchServer(["in", "the"])
        server.add_document(1, "cat in the city", DocumentStatus.ACTUAL, [1, 2, 3])
        results = server.find_top_documents("cat")
        assert len(results) == 1
        assert results[0].id == 1
        assert results[0].rating == 2

    def test_stop_word_query(self, city):
        assert city.find_top_documents("the") == []

    def test_all_stop_word_document_never_matches(self):
        server = SearchServer("in the")
        server.add_document(1, "in the", DocumentStatus.ACTUAL, [1])
        assert server.get_document_count() == 1
        assert server.find_top_documents("in") == []
        assert server.find_top_documents("the", lambda document_id, status, rating: True) == []


class TestAddDocument:
    def test_found_by_term(self, city):
        assert ids(city.find_top_documents("pig")) == [7]

    @pytest.mark.parametrize(
        "raw_query,expected",
        [("cat -black", [2]), ("cat -city", [9]), ("starling", [])],
    )
    def test_minus_terms(self, city, raw_query, expected):
        assert ids(city.find_top_documents(raw_query)) == expected

    def test_rejects_duplicate_and_negative_ids(self, city):
        with pytest.raises(InvalidArgumentError):
            city.add_document(2, "another cat")
        with pytest.raises(InvalidArgumentError):
            city.add_document(-1, "another cat")
        assert city.get_document_count() == 3

    def test_rejects_malformed_text(self, city):
        with pytest.raises(InvalidArgumentError):
            city.add_document(3, "big dog hamst\x12er")
        assert city.find_top_documents("dog") == []
        assert city.get_document_count() == 3


class TestMinusWords:
    @pytest.fixture
    def server(self):
        return make_server(
            "and in on the",
            CITY[:2] + [(9, "big city bright lights", DocumentStatus.ACTUAL, [4, -2, 5])],
        )

    def test_excludes_documents(self, server):
        assert ids(server.find_top_documents("city -cat")) == [9]

    def test_excludes_only_match(self, server):
        assert server.find_top_documents("pig -plane") == []

    def test_minus_beats_plus_of_same_term(self, server):
        assert server.find_top_documents("cat -cat") == []


class TestMatchDocument:
    @pytest.fixture
    def server(self):
        return make_server(
            "and in on the",
            [
                (2, "big cat in the city", DocumentStatus.ACTUAL, [3, 1, -1]),
                (7, "porco rosso the crimson pig on a plane", DocumentStatus.BANNED, [2, 5, 6]),
                (9, "big city bright lights", DocumentStatus.ACTUAL, [4, -2, 5]),
            ],
        )

    @pytest.mark.parametrize(
        "raw_query,expected",
        [
            ("big cat", ["big", "cat"]),
            ("city cat", ["cat", "city"]),
            ("cat dog", ["cat"]),
            ("the big -cat", []),
            ("big city -lights", ["big", "city"]),
            ("in the", []),
        ],
    )
    def test_matched_words(self, server, raw_query, expected):
        words, status = server.match_document(raw_query, 2)
        assert words == expected
        assert status is DocumentStatus.ACTUAL

    def test_returns_status(self, server):
        assert server.match_document("pig", 7) == (["pig"], DocumentStatus.BANNED)

    def test_any_minus_hit_clears_match(self, server):
        assert server.match_document("big city bright lights -bright", 9) == ([], DocumentStatus.ACTUAL)

    def test_unknown_document(self, server):
        with pytest.raises(InvalidArgumentError):
            server.match_document("cat", 3)

    @pytest.mark.parametrize("raw_query", ["cat -", "cat --big"])
    def test_malformed_query(self, server, raw_query):
        with pytest.raises(InvalidArgumentError):
            server.match_document(raw_query, 2)


class TestRanking:
    def test_relevance_sort(self, pets):
        results = pets.find_top_documents("fluffy groomed cat with collar")
        assert ids(results) == [7, 2, 9]
        for previous, current in zip(results, results[1:]):
            assert previous.relevance >= current.relevance

    def test_ties_break_on_rating(self):
        server = make_server(
            "",
            [
                (1, "cat dog", DocumentStatus.ACTUAL, [1]),
                (2, "cat bird", DocumentStatus.ACTUAL, [5]),
                (3, "fish", DocumentStatus.ACTUAL, [3]),
            ],
        )
        results = server.find_top_documents("cat")
        assert ids(results) == [2, 1]
        assert results[0].relevance == pytest.approx(results[1].relevance)

    def test_at_most_five_results(self):
        server = SearchServer()
        for document_id in range(8):
            server.add_document(document_id, f"cat kitten{document_id}", DocumentStatus.ACTUAL, [document_id])
        server.add_document(8, "dog")
        results = server.find_top_documents("cat")
        assert ids(results) == [7, 6, 5, 4, 3]


class TestRating:
    @pytest.fixture
    def server(self):
        documents = PETS[:4] + [
            (11, "red spider peter with black abdomen", DocumentStatus.ACTUAL, []),
        ]
        return make_server("and in on the with", documents)

    def test_average_rating(self, server):
        results = server.find_top_documents("white cat -fluffy")
        assert len(results) == 1
        assert results[0].rating == (8 + -3) // 2 == 2

    def test_empty_ratings(self, server):
        results = server.find_top_documents("spider")
        assert len(results) == 1
        assert results[0].rating == 0


class TestFiltering:
    def test_predicate(self, pets):
        results = pets.find_top_documents(
            "fluffy groomed cat with collar",
            lambda document_id, status, rating: status == DocumentStatus.ACTUAL
            and rating < 0
            and document_id == 9,
        )
        assert ids(results) == [9]
        assert results[0].relevance == pytest.approx(0.25 * math.log(7 / 2), abs=1e-6)

    def test_even_ids(self, pets):
        results = pets.find_top_documents(
            "black cat", lambda document_id, status, rating: document_id % 2 == 0
        )
        assert ids(results) == [2, 16]

    @pytest.mark.parametrize(
        "raw_query,status,expected",
        [
            ("evgen", DocumentStatus.BANNED, [10]),
            ("wayne", DocumentStatus.REMOVED, [15]),
            ("peter", DocumentStatus.IRRELEVANT, [16]),
            ("evgen", DocumentStatus.ACTUAL, []),
        ],
    )
    def test_status(self, pets, raw_query, status, expected):
        assert ids(pets.find_top_documents(raw_query, status)) == expected

    def test_default_status_is_actual(self, pets):
        assert pets.find_top_documents("groomed") == pets.find_top_documents(
            "groomed", DocumentStatus.ACTUAL
        )


def reference_find_top_documents(stop_words, documents, raw_query, predicate):
    """Straightforward TF-IDF evaluation used to cross-check the server."""
    stop = set(stop_words.split())
    terms = {
        document_id: [word for word in text.split() if word not in stop]
        for document_id, text, _, _ in documents
    }
    fields = {
        document_id: (status, int(sum(ratings) / len(ratings)) if ratings else 0)
        for document_id, _, status, ratings in documents
    }
    plus = {word for word in raw_query.split() if not word.startswith("-") and word not in stop}
    minus = {word[1:] for word in raw_query.split() if word.startswith("-") and word[1:] not in stop}

    relevance = {}
    for word in sorted(plus):
        containing = [document_id for document_id, words in terms.items() if word in words]
        if not containing:
            continue
        idf = math.log(len(documents) / len(containing))
        for document_id in containing:
            status, rating = fields[document_id]
            if predicate(document_id, status, rating):
                tf = Counter(terms[document_id])[word] / len(terms[document_id])
                relevance[document_id] = relevance.get(document_id, 0.0) + tf * idf
    for word in minus:
        for document_id, words in terms.items():
            if word in words:
                relevance.pop(document_id, None)
    return relevance


class TestRelevance:
    STOP_WORDS = "and in on the with"

    @pytest.mark.parametrize(
        "raw_query,predicate",
        [
            ("fluffy groomed cat with collar", lambda i, s, r: s == DocumentStatus.ACTUAL),
            ("fluffy groomed cat with collar", lambda i, s, r: s == DocumentStatus.BANNED),
            ("penguin", lambda i, s, r: s == DocumentStatus.REMOVED),
            ("spider", lambda i, s, r: s == DocumentStatus.IRRELEVANT),
            ("black collar -wayne", lambda i, s, r: True),
            ("black ears", lambda i, s, r: r > 2),
        ],
    )
    def test_matches_reference(self, raw_query, predicate):
        server = make_server(self.STOP_WORDS, PETS)
        expected = reference_find_top_documents(self.STOP_WORDS, PETS, raw_query, predicate)
        results = server.find_top_documents(raw_query, predicate)

        assert len(results) == min(len(expected), 5)
        for document in results:
            assert abs(document.relevance - expected[document.id]) < 1e-6


class TestDocumentIds:
    def test_count_and_ordinals(self, city):
        assert city.get_document_count() == 3
        assert len(city) == 3
        assert [city.get_document_id(ordinal) for ordinal in range(3)] == [2, 7, 9]
        assert list(city) == [2, 7, 9]

    @pytest.mark.parametrize("ordinal", [-1, 3])
    def test_out_of_range(self, city, ordinal):
        with pytest.raises(OutOfRangeError):
            city.get_document_id(ordinal)


class TestQueryValidation:
    @pytest.mark.parametrize("raw_query", ["-", "cat -", "cat --dog", "ca\x11t"])
    def test_malformed_query(self, city, raw_query):
        with pytest.raises(InvalidArgumentError):
            city.find_top_documents(raw_query)

    def test_invalid_stop_words(self):
        with pytest.raises(InvalidArgumentError):
            SearchServer("in \x05the")


class TestBatch:
    def test_batch_matches_individual_queries(self, pets):
        raw_queries = ["black", "cat -white", "groomed", "collar", "fluffy tail"] * 3
        expected = [pets.find_top_documents(raw, lambda i, s, r: True) for raw in raw_queries]
        assert pets.find_top_documents_batch(raw_queries, lambda i, s, r: True) == expected

    def test_batch_status_filter(self, pets):
        assert pets.find_top_documents_batch(["evgen", "wayne"], DocumentStatus.BANNED) == [
            pets.find_top_documents("evgen", DocumentStatus.BANNED),
            [],
        ]

    def test_batch_rejects_malformed_query(self, pets):
        with pytest.raises(InvalidArgumentError):
            pets.find_top_documents_batch(["cat", "cat -"])
