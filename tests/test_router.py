"""Test channel mapping build and lookups."""

import pytest

from discord_irc.errors import ConfigurationError
from discord_irc.gateway.router import ChannelRouter


class TestBuild:
    """Test ChannelRouter.from_config."""

    def test_strips_channel_key_and_lowercases(self):
        # Arrange
        raw = {"#general": "#Project secret"}

        # Act
        router = ChannelRouter.from_config(raw)

        # Assert
        assert router.all_mappings() == {"#general": "#project"}

    def test_join_list_keeps_channel_keys(self):
        router = ChannelRouter.from_config({"#general": "#project secret", "#ops": "#ops"})
        assert router.irc_join_list() == ["#project secret", "#ops"]

    def test_empty_irc_channel_names_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelRouter.from_config({"#general": "#ok", "#broken": "   "})
        assert "#broken" in str(exc_info.value)
        assert exc_info.value.code == "empty_irc_channel"

    def test_surrounding_whitespace_ignored(self):
        router = ChannelRouter.from_config({"#general": " #chan"})
        assert router.get_irc_channel("#general") == "#chan"

    def test_non_string_value_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelRouter.from_config({"#general": 42})
        assert exc_info.value.details["key"] == "#general"

    def test_empty_key_rejected(self):
        with pytest.raises(ConfigurationError):
            ChannelRouter.from_config({"": "#chan"})

    def test_two_discord_channels_for_one_irc_channel_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelRouter.from_config({"#a": "#shared", "#b": "#SHARED key"})
        assert exc_info.value.code == "ambiguous_irc_channel"

    def test_duplicate_discord_channel_after_case_folding_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelRouter.from_config({"#Foo": "#one", "#foo": "#two"})
        assert exc_info.value.code == "duplicate_discord_channel"

    def test_empty_mapping(self):
        router = ChannelRouter.from_config({})
        assert router.all_mappings() == {}
        assert router.irc_join_list() == []


class TestLookup:
    """Test lookups in both directions."""

    @pytest.fixture
    def router(self) -> ChannelRouter:
        return ChannelRouter.from_config({"#general": "#project", "#Dev": "#project-dev key"})

    def test_get_irc_channel(self, router):
        assert router.get_irc_channel("#general") == "#project"

    def test_get_irc_channel_case_folded(self, router):
        assert router.get_irc_channel("#Dev") == router.get_irc_channel("#dev") == "#project-dev"

    def test_get_discord_channel(self, router):
        assert router.get_discord_channel("#project") == "#general"

    def test_get_discord_channel_case_folded(self, router):
        assert router.get_discord_channel("#PROJECT-dev") == "#dev"

    def test_unmapped_returns_none(self, router):
        assert router.get_irc_channel("#random") is None
        assert router.get_discord_channel("#random") is None

    def test_round_trip(self, router):
        for discord_channel in router.all_mappings():
            irc_channel = router.get_irc_channel(discord_channel)
            assert router.get_discord_channel(irc_channel) == discord_channel

    def test_all_mappings_is_a_copy(self, router):
        router.all_mappings()["#general"] = "#hijack"
        assert router.get_irc_channel("#general") == "#project"
