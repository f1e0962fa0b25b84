"""
Tests for the login / registration text-entry flow.
"""

import pytest

from egg_catcher.catcher_core.auth import AuthFlow, AuthStage
from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.events import Intent, TextEntry
from egg_catcher.catcher_core.persistence import InMemoryStore


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def store():
    store = InMemoryStore()
    store.authenticate("bob", "hunter2", True)
    return store


@pytest.fixture
def flow(store, config):
    return AuthFlow(store, config)


class TestLogin:
    """Test the two-step login."""

    def test_username_then_password(self, flow, store):
        flow.type_text("bob")
        flow.submit()
        assert flow.stage == AuthStage.PASSWORD
        assert flow.editing_password

        flow.type_text("hunter2")
        flow.submit()
        assert flow.done
        assert flow.player_id == store.authenticate("bob", "hunter2", False)

    def test_unknown_user(self, flow):
        flow.type_text("zed")
        flow.submit()

        assert flow.stage == AuthStage.USERNAME
        assert flow.error_message == "User does not exist"

    def test_wrong_password_returns_to_username(self, flow):
        flow.type_text("bob")
        flow.submit()
        flow.type_text("nope")
        flow.submit()

        assert not flow.done
        assert flow.stage == AuthStage.USERNAME
        assert flow.error_message == "Incorrect password"
        assert flow.password == ""

    def test_empty_username(self, flow):
        flow.submit()
        assert flow.error_message == "Username cannot be empty"

    def test_handle_processes_intents_in_order(self, flow):
        player_id = flow.handle([
            TextEntry("bob"), Intent.SUBMIT, TextEntry("hunter2"), Intent.SUBMIT
        ])
        assert player_id is not None
        assert flow.done

    def test_handle_ignores_gameplay_intents(self, flow):
        assert flow.handle([Intent.MOVE_LEFT, Intent.TOGGLE_PAUSE]) is None
        assert flow.username == ""


class TestRegister:
    """Test the registration path."""

    def test_register_new_player(self, flow, store):
        flow.select_register()
        assert flow.is_register

        flow.type_text("alice")
        flow.submit()
        assert flow.password_stage

        flow.type_text("pw")
        flow.submit()
        assert flow.done
        assert store.user_exists("alice")

    def test_register_taken_name(self, flow):
        flow.select_register()
        flow.type_text("bob")
        flow.submit()

        assert flow.error_message == "Username already taken"
        assert flow.username == ""
        assert not flow.password_stage

    def test_register_empty_password(self, flow):
        flow.select_register()
        flow.type_text("carol")
        flow.submit()
        flow.submit()

        assert not flow.done
        assert flow.error_message == "Password cannot be empty"
        assert flow.stage == AuthStage.USERNAME

    def test_select_login_returns_from_register(self, flow):
        flow.select_register()
        flow.select_login()
        assert flow.stage == AuthStage.USERNAME
        assert not flow.is_register


class TestTextEntry:
    """Test buffer editing."""

    def test_length_cap(self, config, flow):
        flow.type_text("x" * 50)
        assert len(flow.username) == config.auth.max_input_length

    def test_non_printable_dropped(self, flow):
        flow.type_text("a\tb\n")
        assert flow.username == "ab"

    def test_backspace(self, flow):
        flow.type_text("abc")
        flow.backspace()
        assert flow.username == "ab"

    def test_backspace_on_empty(self, flow):
        flow.backspace()
        assert flow.username == ""

    def test_password_is_masked(self, flow):
        flow.type_text("bob")
        flow.submit()
        flow.type_text("secret")
        assert flow.masked_password == "******"
        assert flow.username == "bob"
