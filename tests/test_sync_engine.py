import unittest

from tests.fakes import FakeCatalog, FakeTokenProvider, make_track
from tubemirror.core.sync_channel import SyncChannel
from tubemirror.core.sync_engine import PlaylistSyncEngine
from tubemirror.models.catalog import ApiError, ErrorItem, SearchHit
from tubemirror.models.track import SyncTrack

HOUDINI = SyncTrack(id="test2", title="Houdini", artist="Dua Lipa")


def make_engine(catalog=None, tokens=None) -> PlaylistSyncEngine:
    return PlaylistSyncEngine(
        catalog or FakeCatalog({"Houdini Dua Lipa": SearchHit(video_id="vid-houdini")}),
        tokens or FakeTokenProvider(),
        title="Live",
        description="From the speakers",
    )


class PlaylistSyncEngineTests(unittest.TestCase):
    def test_resolves_and_appends_first_search_result(self) -> None:
        engine = make_engine()
        video_id = engine.process_track(HOUDINI)

        self.assertEqual(video_id, "vid-houdini")
        catalog = engine._catalog
        self.assertEqual(catalog.create_calls, [("token-1", "Live", "From the speakers")])
        self.assertEqual(catalog.search_calls, ["Houdini Dua Lipa"])
        self.assertEqual(catalog.insert_calls, [("token-1", "PL1", "vid-houdini")])
        self.assertIn("test2", engine.session.seen)

    def test_same_id_is_submitted_once(self) -> None:
        engine = make_engine()
        engine.process_track(HOUDINI)
        self.assertIsNone(engine.process_track(HOUDINI))

        self.assertEqual(len(engine._catalog.search_calls), 1)
        self.assertEqual(len(engine._catalog.insert_calls), 1)

    def test_pre_resolved_video_id_skips_search(self) -> None:
        engine = make_engine()
        track = SyncTrack(id="x", title="Anything", artist="Anyone", video_id="vid-known")

        self.assertEqual(engine.process_track(track), "vid-known")
        self.assertEqual(engine._catalog.search_calls, [])
        self.assertEqual(engine._catalog.insert_calls, [("token-1", "PL1", "vid-known")])

    def test_unresolved_track_is_dropped_but_seen(self) -> None:
        engine = make_engine()
        track = SyncTrack(id="nope", title="Unknown", artist="Nobody")

        self.assertIsNone(engine.process_track(track))
        self.assertEqual(engine._catalog.insert_calls, [])
        self.assertIn("nope", engine.session.seen)

    def test_search_error_is_treated_as_unresolved(self) -> None:
        catalog = FakeCatalog({"Houdini Dua Lipa": ApiError(code=403, message="quotaExceeded")})
        engine = make_engine(catalog)
        self.assertIsNone(engine.process_track(HOUDINI))
        self.assertEqual(catalog.insert_calls, [])

    def test_insert_failure_still_marks_seen(self) -> None:
        catalog = FakeCatalog(
            {"Houdini Dua Lipa": SearchHit(video_id="vid-houdini")},
            insert_error=ApiError(code=404, message="playlistNotFound"),
        )
        engine = make_engine(catalog)

        self.assertEqual(engine.process_track(HOUDINI), "vid-houdini")
        engine.process_track(HOUDINI)
        self.assertEqual(len(catalog.insert_calls), 1)

    def test_playlist_is_created_once_and_token_reused(self) -> None:
        tokens = FakeTokenProvider()
        engine = make_engine(tokens=tokens)
        for i in range(3):
            engine.process_track(SyncTrack(id=f"t{i}", title="Houdini", artist="Dua Lipa"))

        self.assertEqual(len(engine._catalog.create_calls), 1)
        self.assertEqual(tokens.calls, 1)
        self.assertEqual(engine.session.playlist_id, "PL1")

    def test_create_failure_degrades_every_later_track(self) -> None:
        error = ApiError(
            code=403,
            message="Forbidden",
            errors=[ErrorItem(domain="youtube", reason="forbidden", message="Forbidden")],
        )
        catalog = FakeCatalog(create_result=error)
        engine = make_engine(catalog)

        self.assertIsNone(engine.process_track(HOUDINI))
        self.assertIsNone(engine.process_track(SyncTrack(id="t3", title="a", artist="b")))

        self.assertEqual(len(catalog.create_calls), 2)
        self.assertEqual(catalog.search_calls, [])
        self.assertIsNone(engine.session.playlist_id)

    def test_missing_token_skips_playlist_creation(self) -> None:
        catalog = FakeCatalog()
        engine = make_engine(catalog, FakeTokenProvider(token=None))

        self.assertIsNone(engine.process_track(HOUDINI))
        self.assertEqual(catalog.create_calls, [])

    def test_manual_batch_annotates_tracks(self) -> None:
        engine = make_engine()
        tracks = [
            SyncTrack(id="test1", title="we are never getting back together", artist="Taylor Swift"),
            HOUDINI,
        ]

        processed = engine.create_playlist("Test Playlist", "Test Description", tracks)

        self.assertEqual([t.id for t in processed], ["test1", "test2"])
        self.assertEqual([t.video_id for t in processed], [None, "vid-houdini"])
        self.assertEqual(
            engine._catalog.create_calls, [("token-1", "Test Playlist", "Test Description")]
        )

    def test_batch_continues_after_track_error(self) -> None:
        catalog = FakeCatalog({"two y": SearchHit(video_id="vid-two")})
        engine = make_engine(catalog)
        original = catalog.search

        def search(query, token=None):
            if query == "one x":
                raise AttributeError("bad reply")
            return original(query, token)

        catalog.search = search
        tracks = [
            SyncTrack(id="a", title="one", artist="x"),
            SyncTrack(id="b", title="two", artist="y"),
        ]

        processed = engine.create_playlist("T", "", tracks)

        self.assertEqual([t.video_id for t in processed], [None, "vid-two"])
        self.assertEqual(engine.session.seen, {"a", "b"})

    def test_run_drains_channel_until_closed(self) -> None:
        engine = make_engine()
        channel = SyncChannel()
        channel.send(make_track("uri-1", title="Houdini", artist="Dua Lipa"))
        channel.send(make_track("uri-1", title="Houdini", artist="Dua Lipa"))
        channel.close()

        engine.run(channel)

        self.assertEqual(engine.session.seen, {"uri-1"})
        self.assertEqual(len(engine._catalog.insert_calls), 1)

    def test_live_and_manual_paths_share_seen_set(self) -> None:
        engine = make_engine()
        channel = SyncChannel()
        channel.send(make_track("uri-1", title="Houdini", artist="Dua Lipa"))
        channel.close()
        engine.start(channel)
        engine.join(timeout=5)

        processed = engine.create_playlist(
            "Manual", "", [SyncTrack(id="uri-1", title="Houdini", artist="Dua Lipa")]
        )

        self.assertIsNone(processed[0].video_id)
        self.assertEqual(len(engine._catalog.search_calls), 1)


if __name__ == "__main__":
    unittest.main()
