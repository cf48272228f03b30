"""Integration tests: accounts and journals end to end on a file database."""

import pytest

from food_journal.auth import AuthFlow, AuthMode
from food_journal.domain.models import Category
from food_journal.journal import JournalFlow
from food_journal.persistence import JournalRepository, PersistenceGateway, UserRepository
from tests.helpers import RecordingConfirm, StubImageSource
from tests.helpers.fakes import TEST_HASH_ITERATIONS


@pytest.fixture
def database_url(tmp_path):
    """File-backed database URL; every test opens its own gateways."""
    return f"sqlite:///{tmp_path / 'integration' / 'food_journal.db'}"


def open_gateway(database_url: str) -> PersistenceGateway:
    gateway = PersistenceGateway(database_url)
    gateway.initialize()
    return gateway


def sign_up(gateway: PersistenceGateway, email: str, password: str = "secret1") -> int:
    flow = AuthFlow(UserRepository(gateway), hash_iterations=TEST_HASH_ITERATIONS)
    flow.toggle_mode()
    result = flow.submit(email, password)
    assert result.success, result.alert
    return result.user_id


def journal_for(gateway: PersistenceGateway, user_id: int, uri: str = "file:///photos/a.jpg") -> JournalFlow:
    flow = JournalFlow(
        JournalRepository(gateway),
        user_id,
        image_source=StubImageSource(uri=uri),
        confirm=RecordingConfirm(answer=True),
    )
    assert flow.refresh() is None
    return flow


class TestAccountLifecycle:
    """Register, restart, log in."""

    def test_register_then_login_after_restart(self, database_url):
        """Test an account survives closing and reopening the database."""
        gateway = open_gateway(database_url)
        user_id = sign_up(gateway, "a@b.com")
        gateway.close()

        reopened = open_gateway(database_url)
        flow = AuthFlow(UserRepository(reopened), hash_iterations=TEST_HASH_ITERATIONS)
        assert flow.mode is AuthMode.LOGIN

        result = flow.submit("a@b.com", "secret1")

        assert result.success
        assert result.user_id == user_id
        reopened.close()

    def test_duplicate_registration_across_gateways(self, database_url):
        """Test the unique email holds even when two gateways share a file."""
        first = open_gateway(database_url)
        second = open_gateway(database_url)
        sign_up(first, "a@b.com")

        flow = AuthFlow(UserRepository(second), hash_iterations=TEST_HASH_ITERATIONS)
        flow.toggle_mode()
        result = flow.submit("a@b.com", "another1")

        assert result.alert.message == "Email already exists"
        assert UserRepository(second).count() == 1
        first.close()
        second.close()


class TestJournalLifecycle:
    """Create, filter, edit and delete entries through the flows."""

    def test_full_journal_session(self, database_url):
        """Test a complete session and that its result persists."""
        gateway = open_gateway(database_url)
        user_id = sign_up(gateway, "cook@food.com")
        flow = journal_for(gateway, user_id)

        for description, category in [
            ("Porridge", "Breakfast"),
            ("Ramen", "Lunch"),
            ("Apple", "Snacks"),
        ]:
            flow.take_photo()
            flow.set_description(description)
            flow.set_category(category)
            assert flow.save().message == "Journal saved successfully"

        assert [e.description for e in flow.entries] == ["Apple", "Ramen", "Porridge"]

        flow.set_filter("Lunch")
        ramen = flow.visible_entries()[0]
        assert ramen.description == "Ramen"

        flow.begin_edit(ramen.id)
        flow.set_description("Ramen with egg")
        flow.set_category("Dinner")
        assert flow.save().message == "Journal updated successfully"
        assert flow.visible_entries() == []

        porridge = next(e for e in flow.entries if e.description == "Porridge")
        assert flow.delete(porridge.id).title == "Deleted"
        gateway.close()

        reopened = open_gateway(database_url)
        entries = JournalRepository(reopened).list_for_user(user_id)
        assert [(e.description, e.category) for e in entries] == [
            ("Apple", Category.SNACKS),
            ("Ramen with egg", Category.DINNER),
        ]
        edited = entries[1]
        assert edited.id == ramen.id
        assert edited.date == ramen.date
        reopened.close()

    def test_accounts_are_isolated(self, database_url):
        """Test two accounts on one database never see each other's entries."""
        gateway = open_gateway(database_url)
        alice = journal_for(gateway, sign_up(gateway, "alice@food.com"))
        bob = journal_for(gateway, sign_up(gateway, "bob@food.com"))

        alice.take_photo()
        alice.set_description("Alice's salad")
        alice.save()

        assert bob.refresh() is None
        assert bob.entries == []

        alice_entry = alice.entries[0]
        alert = bob.delete(alice_entry.id)

        assert alert.message == "Journal entry not found"
        assert alice.refresh() is None
        assert len(alice.entries) == 1
        gateway.close()
