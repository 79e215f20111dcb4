import pytest

from sketchguess.game import scoring
from sketchguess.game.errors import RoomNotFound


@pytest.mark.parametrize('position,points', [(1, 100), (2, 70), (3, 50), (4, 30), (9, 30)])
def test_points_by_position(position, points):
    assert scoring.points_for_position(position) == points


def test_normalize_guess():
    assert scoring.normalize_guess('  BaNaNa \n') == 'banana'


def _scores(room):
    return {p.name: p.score for p in room.players.values()}


def _start_round(service, code, word='banana'):
    service.start_game(code)
    service.start_round(code, word)
    return service.store.get(code)


def test_chat_without_active_word_is_plain_chat(service, emitter, two_players):
    service.submit_message(two_players, 'sid-bob', 'banana')
    msg = emitter.last('chatMessage')
    assert msg['to'] == 'AB12'
    assert msg['data'] == {'sender': 'Bob', 'text': 'banana'}
    assert _scores(service.store.get(two_players)) == {'Alice': 0, 'Bob': 0}


def test_wrong_guess_is_relayed_verbatim(service, emitter, two_players):
    _start_round(service, two_players)
    emitter.clear()
    service.submit_message(two_players, 'sid-bob', '  Apple ')
    assert emitter.last('chatMessage')['data'] == {'sender': 'Bob', 'text': '  Apple '}
    assert emitter.events('updateScores') == []


def test_guesses_score_by_arrival_order(service, emitter, scheduler):
    service.create_room('d', 'Drew', code='BIG')
    names = ['P1', 'P2', 'P3', 'P4', 'P5']
    for i, name in enumerate(names):
        service.join('BIG', f's{i}', name)
    room = _start_round(service, 'BIG', 'taco')
    emitter.clear()

    for i in range(5):
        service.submit_message('BIG', f's{i}', ' TACO ')

    scores = _scores(room)
    assert [scores[n] for n in names] == [100, 70, 50, 30, 30]
    assert scores['Drew'] == 50

    announcements = [m['data'] for m in emitter.events('chatMessage') if m['data']['sender'] == 'SYSTEM']
    assert announcements[0]['text'] == 'P1 guessed the word! (+100)'
    assert len(emitter.events('updateScores')) == 5
    assert len(emitter.events('roundOver')) == 1


def test_correct_guesser_cannot_score_twice(service, emitter, four_players):
    room = _start_round(service, four_players)
    service.submit_message(four_players, 'sid-b', 'banana')
    emitter.clear()

    service.submit_message(four_players, 'sid-b', 'banana')
    service.submit_message(four_players, 'sid-b', 'hello?')
    assert emitter.sent == []
    assert _scores(room) == {'Ann': 10, 'Ben': 100, 'Cal': 0, 'Dee': 0}


def test_same_name_players_score_separately(service, emitter):
    service.create_room('d', 'Drew', code='DUP')
    service.join('DUP', 's1', 'Sam')
    service.join('DUP', 's2', 'Sam')
    room = _start_round(service, 'DUP')

    service.submit_message('DUP', 's1', 'banana')
    service.submit_message('DUP', 's2', 'banana')
    assert room.players['s1'].score == 100
    assert room.players['s2'].score == 70


def test_drawer_cannot_guess_or_leak(service, emitter, two_players):
    room = _start_round(service, two_players)
    emitter.clear()

    service.submit_message(two_players, 'sid-alice', 'it is a banana!')
    notice = emitter.last('chatMessage')
    assert notice['to'] == 'sid-alice'
    assert notice['data']['sender'] == 'SYSTEM'
    assert room.guessed == set()
    assert _scores(room) == {'Alice': 0, 'Bob': 0}

    service.submit_message(two_players, 'sid-alice', 'think yellow')
    assert emitter.last('chatMessage')['to'] == 'AB12'


def test_round_ends_when_everyone_guessed(service, emitter, scheduler, four_players):
    room = _start_round(service, four_players)
    emitter.clear()

    service.submit_message(four_players, 'sid-b', 'banana')
    service.submit_message(four_players, 'sid-c', 'banana')
    assert emitter.events('roundOver') == []

    service.submit_message(four_players, 'sid-d', 'banana')
    over = emitter.events('roundOver')
    assert len(over) == 1
    assert over[0]['data']['correctWord'] == 'banana'
    assert 'Everyone guessed it' in over[0]['data']['message']
    assert room.timer is None
    assert scheduler.active('round-timer') == []

    # Chat during the intermission is plain chat and cannot re-end the round.
    service.submit_message(four_players, 'sid-b', 'banana')
    assert len(emitter.events('roundOver')) == 1

    scheduler.advance(3)
    selected = emitter.events('drawerSelected')
    assert len(selected) == 1
    assert selected[0]['data'] == 'Ben'

    scheduler.advance(60)
    assert len(emitter.events('drawerSelected')) == 1


def test_guesser_leaving_can_complete_round(service, emitter, four_players):
    _start_round(service, four_players)
    service.submit_message(four_players, 'sid-b', 'banana')
    service.submit_message(four_players, 'sid-c', 'banana')
    emitter.clear()

    service.leave('sid-d')
    assert len(emitter.events('roundOver')) == 1


def test_drawer_leaving_ends_round(service, emitter, scheduler, four_players):
    _start_round(service, four_players)
    emitter.clear()

    service.leave('sid-a')
    over = emitter.last('roundOver')
    assert 'drawer left' in over['data']['message']
    scheduler.advance(3)
    assert emitter.last('drawerSelected')['data'] == 'Ben'


def test_dropping_below_two_players_stops_game(service, emitter, scheduler, two_players):
    room = _start_round(service, two_players)
    emitter.clear()

    service.leave('sid-bob')
    assert len(emitter.events('roundOver')) == 1
    assert room.drawer_id is None
    assert room.word is None
    scheduler.advance(100)
    assert emitter.events('drawerSelected') == []


def test_drawer_leaving_while_choosing_advances_once(service, emitter, scheduler, four_players):
    service.start_game(four_players)
    emitter.clear()

    service.leave('sid-a')
    assert emitter.events('roundOver') == []
    scheduler.advance(2)
    assert emitter.events('drawerSelected') == []
    scheduler.advance(1)
    assert [m['data'] for m in emitter.events('drawerSelected')] == ['Ben']

    scheduler.advance(30)
    assert len(emitter.events('drawerSelected')) == 1


def test_moving_rooms_runs_full_leave_on_old_room(service, emitter, scheduler, four_players):
    room = _start_round(service, four_players)
    service.create_room('sid-z', 'Zed', code='TWO')
    emitter.clear()

    service.join('TWO', 'sid-a', 'Ann')

    players = emitter.last('updatePlayers', to='ROOM')
    assert [p['name'] for p in players['data']] == ['Ben', 'Cal', 'Dee']
    over = emitter.events('roundOver', to='ROOM')
    assert len(over) == 1
    assert 'drawer left' in over[0]['data']['message']
    assert room.word is None
    assert room.timer is None
    assert [p['name'] for p in emitter.last('updatePlayers', to='TWO')['data']] == ['Zed', 'Ann']

    scheduler.advance(3)
    assert emitter.last('drawerSelected', to='ROOM')['data'] == 'Ben'


def test_join_unknown_room_keeps_player_where_they_are(service, emitter, two_players):
    with pytest.raises(RoomNotFound):
        service.join('NOPE', 'sid-alice', 'Alice')
    assert service.store.room_of('sid-alice').code == two_players
    assert emitter.events('updatePlayers') == []


def test_chat_history_is_capped(service, emitter, two_players):
    for n in range(160):
        service.submit_message(two_players, 'sid-bob', f'msg {n}')

    history = service.chat_history(two_players)
    assert len(history) == 150
    assert history[0] == {'sender': 'Bob', 'text': 'msg 10'}
    assert history[-1] == {'sender': 'Bob', 'text': 'msg 159'}
    assert service.chat_history('NOPE') == []
