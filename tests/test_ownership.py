"""Unit tests for auth/ownership.py."""

import pytest

from auth.models import Identity
from auth.ownership import ensure_owner, is_owner
from core.errors import ForbiddenError


class TestOwnership:
    def test_owner_matches(self) -> None:
        assert is_owner(Identity(user_id="a1"), "a1") is True
        ensure_owner(Identity(user_id="a1"), "a1", "delete this folder")

    @pytest.mark.parametrize("owner_id", ["b2", "A1", "a1 ", "", None])
    def test_anything_but_exact_match_is_refused(self, owner_id) -> None:
        assert is_owner(Identity(user_id="a1"), owner_id) is False

    def test_ensure_owner_raises_forbidden(self) -> None:
        with pytest.raises(ForbiddenError) as excinfo:
            ensure_owner(Identity(user_id="a1"), "b2", "delete this folder")
        assert excinfo.value.status_code == 403
        assert excinfo.value.message == "Not authorized to delete this folder"
