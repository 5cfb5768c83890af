"""Tests for plaintext scoring metrics and the scoring engine."""

import pytest

from vigenere_breaker.models.schemas import ScoringMethod
from vigenere_breaker.services.cipher import Alphabet, encrypt
from vigenere_breaker.services.scoring import ScoreCache, ScoringEngine, is_unscoreable
from vigenere_breaker.services.scoring import metrics
from vigenere_breaker.services.scoring.ngrams import NgramTable, get_ngram_table


ENGLISH = (
    "CRYPTOGRAPHY IS THE STUDY OF SECURE COMMUNICATION IN THE PRESENCE "
    "OF ADVERSARIES. LONG BEFORE COMPUTERS EXISTED PEOPLE INVENTED CIPHERS "
    "TO HIDE MEANING FROM UNAUTHORIZED READERS. SOME METHODS RELIED ON SIMPLE "
    "SUBSTITUTION WHILE OTHERS USED TRANSPOSITION OR PERIODIC KEYS."
)


class TestMetrics:
    """Test suite for the individual metrics."""

    def test_letters_only(self):
        assert metrics.letters_only("Hello, World! 42") == "HELLOWORLD"

    def test_index_of_coincidence(self):
        assert metrics.index_of_coincidence("AAAA") == 1.0
        assert metrics.index_of_coincidence("ABCD") == 0.0
        assert metrics.index_of_coincidence("A") is None

    def test_ioc_closeness_range(self):
        score = metrics.ioc_closeness(metrics.letters_only(ENGLISH))
        assert 50.0 < score <= 100.0
        assert metrics.ioc_closeness("A") == metrics.UNSCOREABLE

    def test_chi_squared_prefers_english(self):
        english = metrics.letters_only(ENGLISH)
        skewed = "Z" * len(english)
        assert metrics.chi_squared(english) < metrics.chi_squared(skewed)
        assert metrics.chi_squared_fit("ABCD") == metrics.UNSCOREABLE

    def test_impossible_bigrams(self):
        assert metrics.impossible_bigram_count("QZJQ") == 2
        assert metrics.impossible_bigram_penalty("QZJQ") == -10.0
        assert metrics.impossible_bigram_penalty("THE") == 0.0

    def test_word_heuristic_rewards_common_words(self):
        english = "IT IS THE END OF AN ERA"
        noise = "XQ VB ZJK WPF"
        assert metrics.word_heuristic(english, metrics.letters_only(english)) > 40.0
        assert metrics.word_heuristic(noise, metrics.letters_only(noise)) < 10.0

    def test_word_heuristic_capped(self):
        text = "OF " * 50
        assert metrics.word_heuristic(text, metrics.letters_only(text)) <= 100.0

    def test_ngram_percent_bounds(self):
        table = get_ngram_table(4, 1e-10)
        assert metrics.ngram_percent(table.log_floor, table) == 0.0
        assert metrics.ngram_percent(0.0, table) == 100.0
        assert metrics.ngram_percent(metrics.UNSCOREABLE, table) == 0.0


class TestNgramTable:
    def test_unseen_grams_get_floor(self):
        table = NgramTable.from_frequencies(2, {"TH": 50.0, "HE": 50.0}, 1e-6)
        assert table.log_probability("QZ") == pytest.approx(-6.0)
        assert table.log_probability("TH") == pytest.approx(-0.30103, abs=1e-4)

    def test_too_short(self):
        table = get_ngram_table(3, 1e-10)
        assert table.mean_log_probability("TH") is None

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "english_bigrams.txt"
        path.write_text("TH 30\nHE 10\nbad line\nXYZ 5\n", encoding="utf-8")
        table = NgramTable.from_file(2, path, 1e-10)
        assert set(table.log_probs) == {"TH", "HE"}
        assert table.log_probability("TH") == pytest.approx(-0.12494, abs=1e-4)


class TestScoringEngine:
    """Test suite for the pluggable scorer."""

    @pytest.fixture
    def scorer(self):
        return ScoringEngine()

    @pytest.fixture
    def gibberish(self):
        return encrypt(ENGLISH, "LEMON", Alphabet.english())

    @pytest.mark.parametrize("method", list(ScoringMethod))
    def test_english_beats_ciphertext(self, scorer, gibberish, method):
        if method is ScoringMethod.IMPOSSIBLE_BIGRAMS:
            assert scorer.score(method, ENGLISH) >= scorer.score(method, gibberish)
        else:
            assert scorer.score(method, ENGLISH) > scorer.score(method, gibberish)

    @pytest.mark.parametrize(
        "method,text",
        [
            (ScoringMethod.TRIGRAM, "AB"),
            (ScoringMethod.QUADGRAM, "ABC"),
            (ScoringMethod.CHI_SQUARED, "ABCD"),
            (ScoringMethod.COMBINED, "A-B-C"),
            (ScoringMethod.WORDS, "A"),
        ],
    )
    def test_short_text_is_unscoreable(self, scorer, method, text):
        assert is_unscoreable(scorer.score(method, text))

    def test_deterministic(self, scorer):
        first = scorer.evaluate(ScoringMethod.COMBINED, ENGLISH)
        second = ScoringEngine().evaluate(ScoringMethod.COMBINED, ENGLISH)
        assert first == second

    def test_cache_hits(self):
        scorer = ScoringEngine(cache=ScoreCache(max_entries=10))
        scorer.score("quadgram", ENGLISH)
        scorer.score("quadgram", ENGLISH)
        assert scorer.cache.hits == 1
        assert scorer.cache.misses == 1

    def test_combined_breakdown(self, scorer):
        result = scorer.evaluate(ScoringMethod.COMBINED, ENGLISH)
        assert set(result.breakdown) == {"bigram", "trigram", "quadgram", "ioc", "words", "penalty"}
        weighted = sum(
            weight * result.breakdown[name]
            for name, weight in ScoringEngine.COMBINED_WEIGHTS.items()
        )
        assert result.score == pytest.approx(weighted + result.breakdown["penalty"])

    def test_method_accepts_string(self, scorer):
        assert scorer.score("ioc", ENGLISH) == scorer.score(ScoringMethod.INDEX_OF_COINCIDENCE, ENGLISH)

    def test_unknown_method(self, scorer):
        with pytest.raises(ValueError):
            scorer.score("soundex", ENGLISH)


class TestScoreCache:
    def test_evicts_oldest(self):
        cache: ScoreCache[int] = ScoreCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert cache.evictions == 1

    def test_memory_limit_signal(self):
        cache: ScoreCache[int] = ScoreCache(max_entries=100, memory_limit_bytes=100)
        assert not cache.over_memory_limit
        cache.put("x" * 500, 1)
        assert cache.over_memory_limit
        cache.clear()
        assert not cache.over_memory_limit
        assert len(cache) == 0
