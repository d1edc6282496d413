from lobby.session.models import GameAssignment
from lobby.session.redirect import RedirectTrigger
from lobby.tests.mocks import RecordingNavigator


class TestRedirectTrigger:
    def test_absent_assignment_does_not_navigate(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav)
        assert trigger.observe(None) is False
        assert nav.paths == []

    def test_navigates_once_per_game_id(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav)
        assert trigger.observe(GameAssignment(game_id="g1")) is True
        assert trigger.observe(GameAssignment(game_id="g1")) is False
        assert trigger.observe(GameAssignment(game_id="g1")) is False
        assert nav.paths == ["/game/g1"]

    def test_new_game_id_navigates_again(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav)
        trigger.observe(GameAssignment(game_id="g1"))
        trigger.observe(GameAssignment(game_id="g2"))
        assert nav.paths == ["/game/g1", "/game/g2"]
        assert trigger.last_game_id == "g2"

    def test_absent_after_present_keeps_memory(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav)
        trigger.observe(GameAssignment(game_id="g1"))
        trigger.observe(None)
        trigger.observe(GameAssignment(game_id="g1"))
        assert nav.paths == ["/game/g1"]

    def test_reset_allows_same_game_again(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav)
        trigger.observe(GameAssignment(game_id="g1"))
        trigger.reset()
        trigger.observe(GameAssignment(game_id="g1"))
        assert nav.paths == ["/game/g1", "/game/g1"]

    def test_custom_path_template(self):
        nav = RecordingNavigator()
        trigger = RedirectTrigger(nav, path_template="/play/{game_id}/board")
        trigger.observe(GameAssignment(game_id="abc"))
        assert nav.paths == ["/play/abc/board"]
