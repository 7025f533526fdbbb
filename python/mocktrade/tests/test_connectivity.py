"""
Unit tests for ConnectivityGate.
"""

import unittest

from mocktrade.exceptions import MissingCredentialError
from mocktrade.feed import EventFeed, FeedKind
from mocktrade.state import ConnectivityGate


class TestConnectivityGate(unittest.TestCase):
    """Test connect / disconnect semantics."""

    def setUp(self):
        """Set up test fixtures."""
        self.feed = EventFeed()
        self.gate = ConnectivityGate(feed=self.feed)

    def test_connect_without_credential_fails(self):
        """connect(None) with nothing configured raises and stays disconnected."""
        with self.assertRaises(MissingCredentialError):
            self.gate.connect(None)

        self.assertFalse(self.gate.connected)
        events = self.feed.snapshot()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].kind, FeedKind.ERROR)
        self.assertEqual(events[0].text, "No API token configured. Use settings.")

    def test_connect_then_disconnect(self):
        """connect('token') then disconnect() leaves the gate offline with two SYSTEM events."""
        self.gate.connect("token")
        self.assertTrue(self.gate.connected)
        self.gate.disconnect()

        self.assertFalse(self.gate.connected)
        events = self.feed.snapshot()
        self.assertEqual([e.kind for e in events], [FeedKind.SYSTEM, FeedKind.SYSTEM])
        self.assertEqual(events[0].text, "Disconnected from market")
        self.assertEqual(events[1].text, "Connected to market (mock)")

    def test_connect_uses_configured_credential(self):
        """A previously configured credential is used when none is passed."""
        self.gate.configure("secret-token")
        self.gate.connect()

        self.assertTrue(self.gate.connected)
        self.assertEqual(self.gate.state.credential, "secret-token")

    def test_disconnect_is_idempotent(self):
        """Disconnecting twice only repeats the event."""
        self.gate.disconnect()
        self.gate.disconnect()

        self.assertFalse(self.gate.connected)
        self.assertEqual(len(self.feed.snapshot()), 2)

    def test_toggle(self):
        """toggle flips the connection using the configured credential."""
        self.gate.configure("token")

        self.assertTrue(self.gate.toggle())
        self.assertFalse(self.gate.toggle())

    def test_toggle_without_credential(self):
        """toggle from offline without a credential raises."""
        with self.assertRaises(MissingCredentialError):
            self.gate.toggle()

    def test_masked_credential(self):
        """The display form never reveals the token."""
        self.assertEqual(self.gate.masked_credential, "not set")
        self.gate.configure("abc123")
        self.assertEqual(self.gate.masked_credential, "***hidden***")
        self.gate.configure("")
        self.assertEqual(self.gate.masked_credential, "not set")


if __name__ == "__main__":
    unittest.main()
