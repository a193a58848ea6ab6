import threading
import unittest

from tests.fakes import make_track
from tubemirror.core.sync_channel import ChannelClosed, SyncChannel


class SyncChannelTests(unittest.TestCase):
    def test_delivers_in_send_order(self) -> None:
        channel = SyncChannel()
        for uri in ("a", "b", "c"):
            channel.send(make_track(uri))
        channel.close()
        self.assertEqual([t.uri for t in channel], ["a", "b", "c"])

    def test_send_after_close_raises(self) -> None:
        channel = SyncChannel()
        channel.close()
        self.assertTrue(channel.closed)
        with self.assertRaises(ChannelClosed):
            channel.send(make_track("a"))

    def test_close_is_idempotent(self) -> None:
        channel = SyncChannel()
        channel.close()
        channel.close()
        self.assertEqual(list(channel), [])

    def test_close_ends_blocked_consumer(self) -> None:
        channel = SyncChannel()
        received = []
        consumer = threading.Thread(target=lambda: received.extend(channel))
        consumer.start()
        channel.send(make_track("a"))
        channel.close()
        consumer.join(timeout=5)
        self.assertFalse(consumer.is_alive())
        self.assertEqual([t.uri for t in received], ["a"])


if __name__ == "__main__":
    unittest.main()
