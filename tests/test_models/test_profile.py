"""Unit tests for AffinityProfile."""
import pytest

from tvbingefriend_personalization_service.models import AffinityProfile, ProfileFormatError


class TestAffinityProfile:
    """Tests for AffinityProfile accessors."""

    def test_empty_profile(self):
        profile = AffinityProfile.empty()

        assert profile.is_empty
        assert profile.media_count("tv") == 0
        assert profile.genre_count(18) == 0

    def test_counts(self, sample_profile):
        assert not sample_profile.is_empty
        assert sample_profile.media_count("tv") == 3
        assert sample_profile.media_count("movie") == 0
        assert sample_profile.genre_count(18) == 2

    def test_copy_is_independent(self, sample_profile):
        """Test that mutating a copy leaves the original untouched."""
        # Act
        clone = sample_profile.copy()
        clone.media_affinity["tv"] = 99
        clone.genre_affinity[35] = 1

        # Assert
        assert sample_profile.media_affinity == {"tv": 3}
        assert sample_profile.genre_affinity == {18: 2}


class TestAffinityProfileSerialization:
    """Tests for to_dict / from_dict."""

    def test_to_dict_uses_string_genre_keys(self, sample_profile):
        assert sample_profile.to_dict() == {"media": {"tv": 3}, "genres": {"18": 2}}

    def test_from_dict_parses_browser_layout(self):
        """Test reading the layout written by the browser front end."""
        # Act
        profile = AffinityProfile.from_dict(
            {"media": {"tv": 3, "movie": 1}, "genres": {"18": 2, "35": 1}}
        )

        # Assert
        assert profile.media_affinity == {"tv": 3, "movie": 1}
        assert profile.genre_affinity == {18: 2, 35: 1}

    def test_from_dict_none_is_empty(self):
        assert AffinityProfile.from_dict(None).is_empty

    def test_from_dict_missing_sections_are_empty(self):
        profile = AffinityProfile.from_dict({"media": {"movie": 2}})

        assert profile.media_affinity == {"movie": 2}
        assert profile.genre_affinity == {}

    def test_round_trip(self, sample_profile):
        assert AffinityProfile.from_dict(sample_profile.to_dict()) == sample_profile

    @pytest.mark.parametrize("payload", [
        [],
        "profile",
        {"media": ["tv"]},
        {"genres": 5},
        {"media": {"tv": "3"}},
        {"media": {"tv": -1}},
        {"media": {"tv": True}},
        {"media": {"tv": 1.5}},
        {"genres": {"drama": 1}},
    ])
    def test_from_dict_rejects_malformed_payload(self, payload):
        with pytest.raises(ProfileFormatError):
            AffinityProfile.from_dict(payload)

    def test_profile_format_error_is_value_error(self):
        assert issubclass(ProfileFormatError, ValueError)
