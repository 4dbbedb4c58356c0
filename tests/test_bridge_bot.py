"""Test re-attribution of messages relayed by upstream bots."""

from discord_irc.formatting.bridge_bot import reattribute


class TestReattribute:
    def test_relay_bot_message(self):
        # Arrange
        names = {"relaybot"}

        # Act
        relayed, author, body = reattribute("RelayBot", "bob says hello world", names)

        # Assert
        assert relayed is True
        assert author == "bob"
        assert body == "says hello world"

    def test_single_word_body_gives_empty_body(self):
        assert reattribute("relaybot", "bob", {"relaybot"}) == (True, "bob", "")

    def test_empty_body(self):
        assert reattribute("relaybot", "", {"relaybot"}) == (True, "", "")

    def test_multiple_spaces_preserved_in_remainder(self):
        assert reattribute("relaybot", "bob a  b", {"relaybot"}) == (True, "bob", "a  b")

    def test_other_author_unchanged(self):
        assert reattribute("alice", "bob says hi", {"relaybot"}) == (False, "alice", "bob says hi")

    def test_empty_set(self):
        assert reattribute("RelayBot", "bob hi", frozenset()) == (False, "RelayBot", "bob hi")
