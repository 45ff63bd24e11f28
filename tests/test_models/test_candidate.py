"""Unit tests for Candidate normalization."""
import pytest

from tvbingefriend_personalization_service.models import Candidate, MediaKind, infer_media_kind


class TestInferMediaKind:
    """Tests for infer_media_kind."""

    def test_explicit_media_type_wins(self):
        assert infer_media_kind({"media_type": "tv", "title": "Has Title"}) == "tv"

    def test_unknown_explicit_media_type_kept_verbatim(self):
        assert infer_media_kind({"media_type": "person"}) == "person"

    def test_title_means_movie(self):
        assert infer_media_kind({"title": "B"}) == MediaKind.MOVIE.value

    def test_name_means_tv(self):
        assert infer_media_kind({"name": "A"}) == MediaKind.TV.value

    @pytest.mark.parametrize("media_type", [None, "", 3])
    def test_non_string_or_empty_media_type_falls_back(self, media_type):
        assert infer_media_kind({"media_type": media_type, "title": "B"}) == "movie"

    def test_empty_title_is_tv(self):
        assert infer_media_kind({"title": ""}) == "tv"


class TestCandidateFromItem:
    """Tests for Candidate.from_item."""

    def test_from_item_reads_fields(self, sample_tv_item, today):
        # Act
        candidate = Candidate.from_item(sample_tv_item)

        # Assert
        assert candidate.id == 1
        assert candidate.media_kind == "tv"
        assert candidate.genre_ids == (18,)
        assert candidate.popularity == 10.0
        assert candidate.vote_average == 7.0
        assert candidate.effective_date == today
        assert candidate.item is sample_tv_item

    def test_missing_fields_default(self):
        candidate = Candidate.from_item({"id": 5})

        assert candidate.genre_ids == ()
        assert candidate.popularity == 0.0
        assert candidate.vote_average == 0.0
        assert candidate.effective_date is None

    def test_malformed_numbers_read_as_zero(self):
        candidate = Candidate.from_item({"id": 5, "popularity": "lots", "vote_average": float("nan")})

        assert candidate.popularity == 0.0
        assert candidate.vote_average == 0.0

    def test_numeric_strings_are_parsed(self):
        candidate = Candidate.from_item({"id": 5, "popularity": "12.5"})

        assert candidate.popularity == 12.5

    def test_genre_ids_filtering(self):
        """Test that only integer-like genre ids are kept, duplicates included."""
        candidate = Candidate.from_item({"id": 5, "genre_ids": [18, "35", True, None, "x", 18]})

        assert candidate.genre_ids == (18, 35, 18)

    def test_genre_ids_not_a_list(self):
        assert Candidate.from_item({"id": 5, "genre_ids": "18"}).genre_ids == ()

    def test_release_date_preferred_over_first_air_date(self):
        candidate = Candidate.from_item(
            {"id": 5, "release_date": "2024-01-01", "first_air_date": "2020-01-01"}
        )

        assert candidate.effective_date == "2024-01-01"

    def test_empty_release_date_falls_through(self):
        candidate = Candidate.from_item(
            {"id": 5, "release_date": "", "first_air_date": "2020-01-01"}
        )

        assert candidate.effective_date == "2020-01-01"

    def test_dedup_key(self, sample_movie_item):
        assert Candidate.from_item(sample_movie_item).dedup_key == "2-movie"

    @pytest.mark.parametrize("raw", ["--5", "²", "", " ", "1.5", "-"])
    def test_unparsable_genre_id_strings_dropped(self, raw):
        """Test that strings int() rejects are skipped rather than raised."""
        candidate = Candidate.from_item({"id": 5, "genre_ids": [raw, 18]})

        assert candidate.genre_ids == (18,)
