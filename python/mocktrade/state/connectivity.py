"""
Connectivity gate.

Tracks whether the demo account is "live" and which API credential is
configured. Nothing here talks to a network; the connection is a mock.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from ..exceptions import MissingCredentialError
from ..feed.event_feed import EventFeed, FeedKind

logger = logging.getLogger(__name__)

CONNECTED_TEXT = "Connected to market (mock)"
DISCONNECTED_TEXT = "Disconnected from market"
MISSING_CREDENTIAL_TEXT = "No API token configured. Use settings."


@dataclass
class ConnectionState:
    """Connection flag plus the configured credential."""

    connected: bool = False
    credential: Optional[str] = None


class ConnectivityGate:
    """Mock market connection.

    ``connect`` requires a credential, either passed in or configured earlier.
    Failures publish an ERROR event; connect and disconnect publish SYSTEM
    events.
    """

    def __init__(self, feed: Optional[EventFeed] = None, credential: Optional[str] = None):
        self.feed = feed
        self.state = ConnectionState(credential=credential or None)

    @property
    def connected(self) -> bool:
        return self.state.connected

    @property
    def masked_credential(self) -> str:
        """Display form of the credential; never reveals the token."""
        return "***hidden***" if self.state.credential else "not set"

    def configure(self, credential: Optional[str]) -> None:
        """Store (or clear, with None/empty) the API credential."""
        self.state.credential = credential or None
        logger.info(f"API credential {'configured' if self.state.credential else 'cleared'}")

    def connect(self, credential: Optional[str] = None) -> None:
        """
        Connect using the given credential or the configured one.

        Args:
            credential: Optional credential; remembered when given.

        Raises:
            MissingCredentialError: If no credential is available.
        """
        if credential:
            self.state.credential = credential
        if not self.state.credential:
            self._publish(FeedKind.ERROR, MISSING_CREDENTIAL_TEXT)
            logger.warning("Connect rejected: no API credential configured")
            raise MissingCredentialError(MISSING_CREDENTIAL_TEXT)

        self.state.connected = True
        self._publish(FeedKind.SYSTEM, CONNECTED_TEXT)
        logger.info("Connected to market (mock)")

    def disconnect(self) -> None:
        """Disconnect; repeated calls only repeat the feed event."""
        self.state.connected = False
        self._publish(FeedKind.SYSTEM, DISCONNECTED_TEXT)
        logger.info("Disconnected from market")

    def toggle(self) -> bool:
        """
        Disconnect when connected, otherwise connect with the configured credential.

        Returns:
            New connected flag.

        Raises:
            MissingCredentialError: If connecting without a credential.
        """
        if self.state.connected:
            self.disconnect()
        else:
            self.connect()
        return self.state.connected

    def _publish(self, kind: FeedKind, text: str) -> None:
        if self.feed is not None:
            self.feed.publish_text(kind, text)
