from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

import pytest

from core.dispatcher import Dispatcher
from core.matcher import matching_triggers
from core.models import Attachment, Message, ReactionError, SentimentScore, Track
from reactions import BotContext, MusicReactions, Services, build_registry
from reactions.music import INVALID_VOLUME, parse_volume


class FakeChat:
    def __init__(self) -> None:
        self.posts: list[str] = []
        self.attachments: list[tuple[str, Attachment]] = []

    async def post_message(self, text: str) -> None:
        self.posts.append(text)

    async def post_message_with_attachment(self, text: str, attachment: Attachment) -> None:
        self.attachments.append((text, attachment))


class FakePlayback:
    def __init__(self, track: Track = Track("Bob Marley", "Three Little Birds (Live)")) -> None:
        self.track = track
        self.volume = 30
        self.calls: list[tuple] = []

    async def play_uri(self, uri: str) -> None:
        self.calls.append(("play_uri", uri))

    async def next_track(self) -> None:
        self.calls.append(("next",))

    async def previous_track(self) -> None:
        self.calls.append(("previous",))

    async def pause(self) -> None:
        self.calls.append(("pause",))

    async def play(self) -> None:
        self.calls.append(("play",))

    async def set_volume(self, volume: int) -> None:
        self.calls.append(("set_volume", volume))
        self.volume = volume

    async def get_volume(self) -> int:
        return self.volume

    async def current_track(self) -> Track:
        return self.track


class FakeImages:
    def __init__(self, url: Optional[str]) -> None:
        self.url = url
        self.phrases: list[str] = []

    async def translate(self, phrase: str) -> Optional[str]:
        self.phrases.append(phrase)
        return self.url


class FakeLyrics:
    def __init__(self, lines: Optional[list[str]]) -> None:
        self.lines = lines

    async def get_lyrics(self, artist: str, title: str) -> Optional[list[str]]:
        return self.lines


class FakeSentiment:
    def analyze(self, text: str) -> SentimentScore:
        return SentimentScore(positive=7, negative=1)


def _build(image_url: Optional[str] = "https://media.giphy.com/bird.gif", lyrics: Optional[list[str]] = None):
    chat = FakeChat()
    playback = FakePlayback()
    services = Services(
        chat=chat,
        playback=playback,
        images=FakeImages(image_url),
        lyrics=FakeLyrics(lyrics),
        sentiment=FakeSentiment(),
    )
    context = BotContext(bot_name="jukebot", users={7: "alice"}, media_base_url="http://10.0.0.5:8181")
    reactions = MusicReactions(context, services, rng=random.Random(3))
    return build_registry(reactions, "jukebot"), chat, playback, services


def _dispatch(registry, messages: list[Message]) -> int:
    dispatcher = Dispatcher(registry)

    async def _run() -> int:
        fired = await dispatcher.dispatch(messages)
        await dispatcher.drain()
        return fired

    return asyncio.run(_run())


def _msg(text: str, user: int = 7, ts: float = 1.0) -> Message:
    return Message(id=user, text=text, timestamp=ts)


@pytest.mark.parametrize(
    "text, labels",
    [
        ("failsauce", {"failsauce"}),
        ("ugh no", {"ugh no"}),
        ("nooooo!", {"ugh no"}),
        ("prev", {"previous"}),
        ("What's playing?", {"whats playing"}),
        ("giphy", {"whats playing"}),
        ("SKIP!", {"next"}),
        ("pause!", {"pause"}),
        ("play", {"play"}),
        ("vol 20", {"volume 0 - 100"}),
        ("shut it already", {"shut up"}),
        ("how loud is it", {"loudness"}),
        ("wooooot", {"woot"}),
        ("jukebot help", {"jukebot help"}),
        ("help me", {"jukebot help"}),
        ("what are the lyrics", {"lyrics"}),
        ("giphy lyrics", {"whats playing", "lyrics"}),
        ("next song please", set()),
        ("pause\n", set()),
        ("ugh no\n", set()),
    ],
)
def test_trigger_patterns(text: str, labels: set) -> None:
    registry, *_ = _build()
    assert {t.label for t in matching_triggers(_msg(text), registry)} == labels


def test_next_announces_and_skips_once() -> None:
    registry, chat, playback, _ = _build()

    assert _dispatch(registry, [_msg("next")]) == 1

    assert playback.calls == [("next",)]
    assert chat.posts == ["alice requested to skip to the next track."]


def test_unknown_user_falls_back_to_id() -> None:
    registry, chat, _, _ = _build()
    _dispatch(registry, [_msg("pause", user=99)])
    assert chat.posts == ["99 requested to pause this track."]


def test_volume_in_range_sets_volume() -> None:
    registry, chat, playback, _ = _build()
    _dispatch(registry, [_msg("volume 25")])
    assert playback.calls == [("set_volume", 25)]
    assert chat.posts == ["alice requested to set the volume to 25."]


def test_volume_out_of_range_posts_error_and_rejects(caplog) -> None:
    registry, chat, playback, _ = _build()

    with caplog.at_level(logging.ERROR, logger="core.dispatcher"):
        fired = _dispatch(registry, [_msg("volume 150", ts=1), _msg("next", ts=2)])

    assert fired == 2
    assert INVALID_VOLUME in chat.posts
    assert ("set_volume", 150) not in playback.calls
    # The sibling message in the same batch was still handled.
    assert ("next",) in playback.calls
    assert "[ERROR]" in caplog.text


def test_volume_reaction_raises_reaction_error() -> None:
    registry, chat, _, _ = _build()
    volume = next(t for t in registry if t.label == "volume 0 - 100")
    with pytest.raises(ReactionError):
        asyncio.run(volume.action(_msg("vol 101")))
    assert chat.posts == [INVALID_VOLUME]


def test_parse_volume() -> None:
    assert parse_volume("volume 50") == 50
    assert parse_volume("VOL 7 please") == 7
    assert parse_volume("vol 80%") == 80
    assert parse_volume("volume loud") is None


def test_help_lists_labels_in_order() -> None:
    registry, chat, _, _ = _build()
    _dispatch(registry, [_msg("help")])
    assert chat.posts == ["available commands: " + ", ".join(registry.labels())]
    assert registry.labels()[0] == "failsauce"
    assert registry.labels()[-1] == "lyrics"


def test_whats_playing_posts_gif_for_stripped_title() -> None:
    registry, chat, _, services = _build()
    _dispatch(registry, [_msg("whats playing")])

    assert services.images.phrases == ["Three Little Birds"]
    [(text, attachment)] = chat.attachments
    assert text == "`Bob Marley - Three Little Birds (Live)`"
    assert attachment.image_url == "https://media.giphy.com/bird.gif"


def test_whats_playing_without_gif_says_so() -> None:
    registry, chat, _, _ = _build(image_url=None)
    _dispatch(registry, [_msg("whats playing")])

    [(text, attachment)] = chat.attachments
    assert "couldn't translate this track" in text
    assert attachment.image_url is None


def test_lyrics_miss_is_not_an_error(caplog) -> None:
    registry, chat, _, _ = _build(lyrics=None)

    with caplog.at_level(logging.ERROR, logger="core.dispatcher"):
        _dispatch(registry, [_msg("lyrics")])

    assert chat.posts == ["jukebot couldn't find any lyrics for Bob Marley - Three Little Birds (Live)"]
    assert not caplog.records


def test_lyrics_hit_posts_lyrics_and_verdict() -> None:
    registry, chat, _, _ = _build(lyrics=["Don't worry", "about a thing"])
    _dispatch(registry, [_msg("lyrics")])

    [(text, _)] = chat.attachments
    assert text.startswith("**Bob Marley - Three Little Birds (Live)**")
    assert "Don't worry\nabout a thing" in text
    assert "jukebot believes this is" in text
    assert "Positivity score: 7" in text
    assert "Negativity score: 1" in text


def test_failsauce_plays_served_clip() -> None:
    registry, _, playback, _ = _build()
    _dispatch(registry, [_msg("failsauce")])
    assert playback.calls == [("play_uri", "http://10.0.0.5:8181/wahwahwah.mp3")]


def test_loudness_reports_volume() -> None:
    registry, chat, _, _ = _build()
    _dispatch(registry, [_msg("loudness")])
    assert chat.posts == ["Playback volume is 30."]


def test_woot_posts_phrases() -> None:
    registry, chat, _, _ = _build()
    _dispatch(registry, [_msg("woot")])
    [post] = chat.posts
    assert post


class UnreachableChat(FakeChat):
    async def post_message(self, text: str) -> None:
        raise ConnectionError("chat is unreachable")


def _build_with_chat(
    chat: FakeChat,
    media_base_url: Optional[str] = "http://10.0.0.5:8181",
    playback: Optional[FakePlayback] = None,
):
    playback = playback or FakePlayback()
    services = Services(
        chat=chat,
        playback=playback,
        images=FakeImages(None),
        lyrics=FakeLyrics(None),
        sentiment=FakeSentiment(),
    )
    context = BotContext(bot_name="jukebot", users={7: "alice"}, media_base_url=media_base_url)
    return MusicReactions(context, services, rng=random.Random(3)), playback


@pytest.mark.parametrize(
    "reaction, text, call",
    [
        ("next", "next", ("next",)),
        ("previous", "prev", ("previous",)),
        ("pause", "pause", ("pause",)),
        ("play", "play", ("play",)),
        ("skip_with_prejudice", "ugh no", ("next",)),
        ("volume", "volume 40", ("set_volume", 40)),
    ],
)
def test_speaker_command_runs_when_announcement_fails(reaction: str, text: str, call: tuple, caplog) -> None:
    reactions, playback = _build_with_chat(UnreachableChat())

    with caplog.at_level(logging.WARNING, logger="reactions.music"):
        asyncio.run(getattr(reactions, reaction)(_msg(text)))

    assert playback.calls == [call]
    assert "chat is unreachable" in caplog.text


def test_speaker_failure_is_the_reaction_outcome() -> None:
    class DeadPlayback(FakePlayback):
        async def next_track(self) -> None:
            raise OSError("speaker offline")

    chat = FakeChat()
    reactions, _ = _build_with_chat(chat, playback=DeadPlayback())

    with pytest.raises(OSError, match="speaker offline"):
        asyncio.run(reactions.next(_msg("next")))
    assert chat.posts == ["alice requested to skip to the next track."]


def test_failsauce_without_file_server_tells_the_channel() -> None:
    chat = FakeChat()
    reactions, playback = _build_with_chat(chat, media_base_url=None)

    with pytest.raises(ReactionError) as excinfo:
        asyncio.run(reactions.failsauce(_msg("failsauce")))

    assert chat.posts == [str(excinfo.value)]
    assert "file server is disabled" in chat.posts[0]
    assert playback.calls == []
