"""In-memory backend specifics."""

from src.accounts.core.storage.memory_store import InMemoryUserStore
from src.accounts.entities.core.user import UserRecord


class TestInMemoryUserStore:
    """Test in-memory user store implementation."""

    def setup_method(self):
        """Set up fresh storage for each test."""
        self.store = InMemoryUserStore()

    def test_list_preserves_insertion_order(self):
        for user_id in ["carol", "alice", "bob"]:
            self.store.add(UserRecord(id=user_id, scope_id="acme"))

        assert [r.id for r in self.store.list("acme")] == ["carol", "alice", "bob"]

    def test_mutating_added_record_does_not_change_store(self):
        record = UserRecord(id="alice", display_name="Alice")
        self.store.add(record)

        record.display_name = "Changed"

        assert self.store.fetch("alice").display_name == "Alice"

    def test_mutating_fetched_record_does_not_change_store(self):
        self.store.add(UserRecord(id="alice", display_name="Alice"))

        fetched = self.store.fetch("alice")
        fetched.display_name = "Changed"

        assert self.store.fetch("alice").display_name == "Alice"

    def test_update_preserves_created_at(self):
        original = UserRecord(id="alice")
        self.store.add(original)

        self.store.update(UserRecord(id="alice", display_name="Alice"))

        updated = self.store.fetch("alice")
        assert updated.created_at == original.created_at
        assert updated.updated_at >= original.updated_at

    def test_clear(self):
        self.store.add(UserRecord(id="alice"))

        self.store.clear()

        assert not self.store.exists("alice")
