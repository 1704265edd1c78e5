"""
Tests for the game loops and session manager.

Tests:
- Round start and content failures
- Completion notification
- Mismatch delay scheduling
- Session lifecycle
"""

import asyncio
import logging

import pytest

from ..engine_core import CardFace, Difficulty, Reducer, RoundStatus
from ..session import (
    BlurryImageLoop,
    GameType,
    LoopState,
    MemoryGameLoop,
    SessionManager,
)
from .conftest import FakeContentSource


class Notifier:
    """Counts completion notifications."""

    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail

    async def __call__(self):
        self.calls += 1
        if self.fail:
            raise RuntimeError("notifier down")
        return True


def _pair_ids(round_, key):
    cards = [c for c in round_.cards if c.pair_key == key]
    word = next(c for c in cards if c.face == CardFace.WORD)
    image = next(c for c in cards if c.face == CardFace.IMAGE)
    return word.card_id, image.card_id


class TestBlurryImageLoop:
    """Tests for the blurry-image loop."""

    def test_start_fetches_challenge(self, content_source, reducer):
        loop = BlurryImageLoop(content_source, reducer=reducer)
        turn = asyncio.run(loop.start(Difficulty.MEDIUM))

        assert turn.success
        assert turn.loop_state == LoopState.PLAYING
        assert loop.round.target_word == "dragon"
        assert loop.round.image_url == "img://dragon"
        assert content_source.calls == [("challenge", "Medium")]

    def test_dragon_end_to_end(self, content_source, reducer):
        """Start "dragon" on Easy and win with a sloppy guess."""
        notifier = Notifier()
        loop = BlurryImageLoop(content_source, notifier=notifier, reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            return await loop.submit_guess("Dragon ")

        turn = asyncio.run(play())

        assert turn.loop_state == LoopState.WON
        assert turn.outcome == RoundStatus.WON
        assert notifier.calls == 1

    def test_notifier_called_once_per_win(self, content_source, reducer):
        notifier = Notifier()
        loop = BlurryImageLoop(content_source, notifier=notifier, reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            await loop.submit_guess("dragon")
            await loop.submit_guess("dragon")
            await loop.request_hint()

        asyncio.run(play())
        assert notifier.calls == 1

    def test_loss_does_not_notify(self, content_source, reducer):
        notifier = Notifier()
        loop = BlurryImageLoop(content_source, notifier=notifier, reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            for guess in ["cat", "dog", "bird"]:
                turn = await loop.submit_guess(guess)
            return turn

        turn = asyncio.run(play())
        assert turn.loop_state == LoopState.LOST
        assert notifier.calls == 0

    def test_failing_notifier_is_swallowed(self, content_source, reducer, caplog):
        """Completion is best-effort; a failure is only logged."""
        loop = BlurryImageLoop(content_source, notifier=Notifier(fail=True), reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            return await loop.submit_guess("dragon")

        with caplog.at_level(logging.WARNING, logger="speakids"):
            turn = asyncio.run(play())

        assert turn.loop_state == LoopState.WON
        assert "notifier failed" in caplog.text

    def test_content_failure_is_error_state(self, reducer):
        """A failing content source never raises past the loop."""
        loop = BlurryImageLoop(FakeContentSource(fail=True), reducer=reducer)
        turn = asyncio.run(loop.start(Difficulty.EASY))

        assert not turn.success
        assert turn.loop_state == LoopState.ERROR
        assert turn.error == "Falha ao carregar desafio"
        assert loop.round is None

    def test_input_without_round_rejected(self, reducer):
        loop = BlurryImageLoop(FakeContentSource(fail=True), reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            return await loop.submit_guess("dragon")

        turn = asyncio.run(play())
        assert not turn.success
        assert turn.rejected
        assert turn.loop_state == LoopState.ERROR

    def test_restart_after_failure(self, reducer):
        """A user-initiated retry recovers from a content failure."""
        source = FakeContentSource(fail=True)
        loop = BlurryImageLoop(source, reducer=reducer)

        async def play():
            await loop.start(Difficulty.HARD)
            source.fail = False
            return await loop.restart()

        turn = asyncio.run(play())
        assert turn.loop_state == LoopState.PLAYING
        assert loop.error is None
        assert source.calls[-1] == ("challenge", "Hard")

    def test_restart_replaces_round(self, content_source, reducer):
        loop = BlurryImageLoop(content_source, reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            await loop.submit_guess("snake")
            return await loop.restart()

        turn = asyncio.run(play())
        assert turn.round.attempts_used == 0
        assert turn.loop_state == LoopState.PLAYING

    def test_ignored_guess_reports_reason(self, content_source, reducer):
        loop = BlurryImageLoop(content_source, reducer=reducer)

        async def play():
            await loop.start(Difficulty.EASY)
            return await loop.submit_guess("   ")

        turn = asyncio.run(play())
        assert turn.rejected == "Guess is empty"
        assert turn.loop_state == LoopState.PLAYING


class TestMemoryGameLoop:
    """Tests for the memory-game loop."""

    @pytest.fixture
    def loop(self, content_source, reducer, clock):
        return MemoryGameLoop(content_source, reducer=reducer, sleep=clock.sleep)

    def test_start_builds_table(self, loop):
        turn = asyncio.run(loop.start())

        assert turn.loop_state == LoopState.PLAYING
        assert len(loop.round.cards) == 4

    def test_mismatch_resolves_after_delay(self, loop, clock):
        """Both cards go face-down only after the presentation delay."""

        async def play():
            await loop.start()
            cat_id = _pair_ids(loop.round, "cat")[0]
            dog_id = _pair_ids(loop.round, "dog")[1]
            await loop.flip(cat_id)
            turn = await loop.flip(dog_id)
            assert turn.round.evaluating
            await loop.settle()
            return cat_id, dog_id

        cat_id, dog_id = asyncio.run(play())

        assert clock.now >= loop.reducer.mismatch_delay
        assert sum(clock.sleeps) >= 1.0
        assert loop.round.selected == ()
        assert not loop.round.evaluating
        assert not loop.round.get_card(cat_id).is_flipped
        assert not loop.round.get_card(dog_id).is_flipped

    def test_third_flip_during_delay_ignored(self, loop):
        async def play():
            await loop.start()
            cat_word, cat_image = _pair_ids(loop.round, "cat")
            dog_word, _ = _pair_ids(loop.round, "dog")
            await loop.flip(cat_word)
            await loop.flip(dog_word)
            turn = await loop.flip(cat_image)
            await loop.settle()
            return turn

        turn = asyncio.run(play())
        assert turn.rejected == "Still showing the last pair"
        assert len(turn.round.selected) == 2

    def test_full_match_notifies_once(self, content_source, reducer, clock):
        notifier = Notifier()
        loop = MemoryGameLoop(content_source, notifier=notifier, reducer=reducer, sleep=clock.sleep)

        async def play():
            await loop.start()
            turn = None
            for key in ["cat", "dog"]:
                for card_id in _pair_ids(loop.round, key):
                    turn = await loop.flip(card_id)
            await loop.flip(loop.round.cards[0].card_id)
            return turn

        turn = asyncio.run(play())
        assert turn.loop_state == LoopState.WON
        assert turn.outcome == RoundStatus.WON
        assert notifier.calls == 1

    def test_content_failure_is_error_state(self, reducer):
        loop = MemoryGameLoop(FakeContentSource(fail=True), reducer=reducer)
        turn = asyncio.run(loop.start())

        assert turn.loop_state == LoopState.ERROR
        assert turn.error == "Não foi possível carregar um novo jogo."
        assert loop.round is None

    def test_restart_cancels_pending_resolution(self, content_source, reducer):
        never_wake = asyncio.Event()

        async def sleep(_seconds):
            await never_wake.wait()

        loop = MemoryGameLoop(content_source, reducer=reducer, sleep=sleep)

        async def play():
            await loop.start()
            await loop.flip(_pair_ids(loop.round, "cat")[0])
            await loop.flip(_pair_ids(loop.round, "dog")[0])
            pending = loop._pending
            await asyncio.sleep(0)
            await loop.start()
            await asyncio.sleep(0)
            return pending

        pending = asyncio.run(play())
        assert pending.cancelled()
        assert loop._pending is None
        assert not loop.round.evaluating


class TestSessionManager:
    """Tests for session lifecycle."""

    @pytest.fixture
    def manager(self, content_source):
        return SessionManager(content_source, reducer_factory=Reducer)

    def test_create_session(self, manager):
        session = manager.create_session(GameType.BLURRY_IMAGE)

        assert isinstance(session.loop, BlurryImageLoop)
        assert session.loop.loop_state == LoopState.IDLE
        assert manager.get_session(session.session_id) is session

    def test_each_session_has_own_loop(self, manager):
        a = manager.create_session(GameType.MEMORY_GAME)
        b = manager.create_session(GameType.MEMORY_GAME)

        assert a.session_id != b.session_id
        assert a.loop is not b.loop
        assert a.loop.reducer is not b.loop.reducer

    def test_end_session(self, manager):
        session = manager.create_session(GameType.MEMORY_GAME)

        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager):
        session = manager.create_session(GameType.BLURRY_IMAGE)
        asyncio.run(session.loop.start(Difficulty.EASY))
        done = manager.create_session(GameType.BLURRY_IMAGE)

        async def win():
            await done.loop.start(Difficulty.EASY)
            await done.loop.submit_guess("dragon")

        asyncio.run(win())

        active = manager.list_active_sessions()
        assert session.session_id in active
        assert done.session_id not in active
        assert len(manager.list_sessions()) == 2

    def test_cleanup_stale_sessions(self, manager):
        stale = manager.create_session(GameType.BLURRY_IMAGE)
        fresh = manager.create_session(GameType.BLURRY_IMAGE)
        stale.last_active_at -= 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh

    def test_create_session_sweeps_stale(self, content_source):
        """Abandoned sessions are evicted even if nobody lists games."""
        manager = SessionManager(content_source, max_age_seconds=3600)
        old = [manager.create_session(GameType.BLURRY_IMAGE) for _ in range(50)]
        for session in old:
            session.last_active_at -= 10**6

        fresh = manager.create_session(GameType.MEMORY_GAME)

        assert manager.list_sessions() == [fresh]
