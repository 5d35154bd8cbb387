from __future__ import annotations

import pytest

from irclink.errors.internal import NickInUseError
from irclink.irc.models import ChannelState, Indicator, UserState


def _recorder():  # type: ignore[no-untyped-def]
    events: list[tuple] = []

    def make(name: str):  # type: ignore[no-untyped-def]
        def callback(session, *args):  # type: ignore[no-untyped-def]
            events.append((name, *args))

        return callback

    return events, make


class TestNumerics:
    def test_welcome_resolves_ready_once_and_fires(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"001": make("001")})
        session.process_line(":server 001 me :Welcome")
        session.process_line(":server 001 me :Welcome again")
        assert session.state.ready.result(0) is True
        assert [e[0] for e in events] == ["001", "001"]

    def test_isupport_sets_prefixes_last_write_wins(self, make_session):
        session = make_session()
        session.process_line(":server 005 me PREFIX=(ov)@+ :are supported")
        assert session.prefixes == {"@": "o", "+": "v"}
        session.process_line(":server 005 me PREFIX=(qaohv)~&@%+ :are supported")
        assert session.prefixes["~"] == "q"
        assert len(session.prefixes) == 5

    def test_isupport_without_prefix_leaves_map(self, make_session):
        session = make_session()
        session.process_line(":server 005 me NETWORK=Test :are supported")
        assert session.prefixes == {}

    def test_topic_and_topic_setter(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"332": make("332")})
        session.process_line(":server 332 me #chan :the topic text")
        session.process_line(":server 333 me #chan alice 1300000000")
        topic = session.channels["#chan"].topic
        assert topic.text == "the topic text"
        assert topic.set_by == "alice"
        assert topic.set_at == 1300000000
        assert events[0][0] == "332"

    def test_names_reply_records_modes_and_indicator(self, make_session):
        session = make_session()
        session.process_line(":server 005 me PREFIX=(ov)@+ :are supported")
        session.process_line(":server 353 me @ #chan :@alice +bob carol")
        chan = session.channels["#chan"]
        assert chan.users == {
            "alice": UserState("o"),
            "bob": UserState("v"),
            "carol": UserState(None),
        }
        assert chan.indicator is Indicator.SECRET

    @pytest.mark.parametrize(
        "marker,expected",
        [("=", Indicator.PUBLIC), ("*", Indicator.PRIVATE), ("?", Indicator.UNKNOWN)],
    )
    def test_names_indicator_markers(self, make_session, marker, expected):
        session = make_session()
        session.process_line(f":server 353 me {marker} #chan :carol")
        assert session.channels["#chan"].indicator is expected

    def test_names_reply_merges_with_known_users(self, make_session):
        session = make_session()
        session.process_line(":dave!d@h JOIN #chan")
        session.process_line(":server 005 me PREFIX=(ov)@+ :are supported")
        session.process_line(":server 353 me = #chan :@alice")
        session.process_line(":server 353 me = #chan :bob")
        assert set(session.channels["#chan"].users) == {"dave", "alice", "bob"}
        assert session.channels["#chan"].users["alice"].mode == "o"

    def test_channel_mode_reply(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"324": make("324")})
        session.process_line(":server 324 me #chan +nt")
        session.process_line(":server 324 me #other +lk 10 secret")
        assert session.channels["#chan"].mode == "+nt"
        assert session.channels["#other"].mode == "+lk 10 secret"
        assert len(events) == 2

    def test_nick_in_use_fires_then_raises(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"433": make("433")})
        with pytest.raises(NickInUseError) as excinfo:
            session.process_line(":server 433 * me :Nickname is already in use")
        assert events[0][0] == "433"
        assert excinfo.value.nick == "me"


class TestCommands:
    def test_ping_answers_with_pong(self, make_session, fake_connection):
        session = make_session()
        session.process_line("PING :server123")
        assert fake_connection.sent == ["PONG :server123"]

    def test_ping_preserves_trailing_exactly(self, make_session, fake_connection):
        session = make_session()
        session.process_line("PING :irc.example.net with PING inside")
        assert fake_connection.sent == ["PONG :irc.example.net with PING inside"]

    def test_join_adds_unknown_nick_then_kick_removes_it(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"join": make("join"), "kick": make("kick")})
        session.process_line(":newbie!n@host JOIN #chan")
        assert session.channels["#chan"].users == {"newbie": UserState(None)}
        session.process_line(":op!o@host KICK #chan newbie :bye")
        assert "newbie" not in session.channels["#chan"].users
        assert [e[0] for e in events] == ["join", "kick"]

    def test_join_keeps_existing_user_state(self, make_session):
        session = make_session()
        session.channels["#chan"] = ChannelState(users={"alice": UserState("o")})
        session.process_line(":alice!a@host JOIN :#chan")
        assert session.channels["#chan"].users["alice"].mode == "o"

    def test_kick_removes_target_not_actor(self, make_session):
        session = make_session()
        session.channels["#chan"] = ChannelState(
            users={"op": UserState("o"), "bob": UserState(None)}
        )
        session.process_line(":op!o@host KICK #chan bob")
        assert list(session.channels["#chan"].users) == ["op"]

    def test_part_removes_actor_and_fires(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"part": make("part")})
        session.channels["#chan"] = ChannelState(users={"bob": UserState(None)})
        session.process_line(":bob!b@host PART #chan :later")
        assert session.channels["#chan"].users == {}
        assert events[0][1].params == ["#chan", "later"]

    def test_part_for_unknown_channel_is_noop(self, make_session):
        session = make_session()
        session.process_line(":bob!b@host PART #nowhere")
        assert session.channels == {}

    def test_quit_removes_actor_everywhere(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"part": make("part")})
        session.channels["#a"] = ChannelState(users={"bob": UserState(None)})
        session.channels["#b"] = ChannelState(
            users={"bob": UserState("v"), "carol": UserState(None)}
        )
        session.process_line(":bob!b@host QUIT :Quit: gone")
        assert session.channels["#a"].users == {}
        assert session.channels["#b"].users == {"carol": UserState(None)}
        assert events[0][0] == "part"

    def test_nick_rename_across_channels_for_other_user(self, make_session):
        session = make_session(nick="me")
        session.channels["#a"] = ChannelState(users={"bob": UserState("o")})
        session.channels["#b"] = ChannelState(users={"bob": UserState("v")})
        session.process_line(":bob!b@host NICK robert")
        assert session.channels["#a"].users == {"robert": UserState("o")}
        assert session.channels["#b"].users == {"robert": UserState("v")}
        assert session.nick == "me"

    def test_nick_rename_of_self_updates_session_nick(self, make_session):
        events, make = _recorder()
        session = make_session(nick="me", callbacks={"nick": make("nick")})
        session.channels["#a"] = ChannelState(users={"me": UserState(None)})
        session.process_line(":me!m@host NICK :me2")
        assert session.nick == "me2"
        assert "me2" in session.channels["#a"].users
        assert "me" not in session.channels["#a"].users
        assert events[0][0] == "nick"

    def test_mode_requeries_channel(self, make_session, fake_connection):
        events, make = _recorder()
        session = make_session(callbacks={"mode": make("mode")})
        session.process_line(":op!o@host MODE #chan +o bob")
        assert fake_connection.sent == ["MODE #chan"]
        assert events[0][0] == "mode"

    def test_user_mode_is_not_requeried(self, make_session, fake_connection):
        session = make_session()
        session.process_line(":me MODE me :+i")
        assert fake_connection.sent == []

    def test_privmsg_fires_with_target_and_text(self, make_session):
        events, make = _recorder()
        session = make_session(callbacks={"privmsg": make("privmsg")})
        session.process_line(":alice!~a@host PRIVMSG #chan :hello world")
        name, privmsg = events[0]
        assert name == "privmsg"
        assert privmsg.target == "#chan"
        assert privmsg.text == "hello world"
        assert privmsg.nick == "alice"

    def test_ctcp_fires_lowercased_verb_event(self, make_session):
        events, make = _recorder()
        session = make_session(
            callbacks={
                "privmsg": make("privmsg"),
                "ctcp-action": make("ctcp-action"),
                "ctcp-version": make("ctcp-version"),
            }
        )
        session.process_line(":alice!a@host PRIVMSG #chan :\x01ACTION waves\x01")
        session.process_line(":alice!a@host PRIVMSG me :\x01VERSION\x01")
        assert [e[0] for e in events] == ["ctcp-action", "ctcp-version"]
        assert events[0][1].ctcp_kind == "ACTION"
        assert events[0][1].ctcp_text == "waves"
        assert events[1][1].ctcp_text is None

    def test_unknown_command_fires_passthrough(self, make_session):
        events, make = _recorder()
        session = make_session(
            callbacks={"notice": make("notice"), "376": make("376")}
        )
        session.process_line(":server NOTICE * :*** Looking up your hostname")
        session.process_line(":server 376 me :End of /MOTD command.")
        session.process_line(":server 999 me :nobody listens")
        assert [e[0] for e in events] == ["notice", "376"]
        assert events[0][1].params[-1] == "*** Looking up your hostname"

    def test_lowercase_command_is_dispatched(self, make_session, fake_connection):
        session = make_session()
        session.process_line("ping :x")
        assert fake_connection.sent == ["PONG :x"]
