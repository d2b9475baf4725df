"""
Unit tests for the package facade.

Tests cover:
- Combinators reachable from the top-level package
- Composite rules built only from facade names
"""

import pytest

import sanction
from sanction import Approval, Role, permission, permit, privilege


class TestFacade:
    """Tests for the names sanction exports."""

    @pytest.mark.parametrize(
        ("module", "names"),
        [
            ("privilege", ["every", "some", "cached"]),
            ("permit", ["map"]),
            ("permission", ["every", "some", "map", "create"]),
        ],
    )
    def test_combinators_exported(self, module: str, names: list[str]) -> None:
        layer = getattr(sanction, module)
        for name in names:
            assert callable(getattr(layer, name))

    def test_all_names_resolve(self) -> None:
        for name in sanction.__all__:
            assert hasattr(sanction, name)

    @pytest.mark.asyncio
    async def test_composite_rule_from_facade(self) -> None:
        """A full permission can be assembled from top-level names."""
        admin = privilege.cached(lambda role: Approval(value=role.tag == "admin"))
        needs_admin = permission.create(permit.map(lambda tag: Role(tag=tag), str.lower))

        assert await sanction.is_permissioned(needs_admin, admin, "ADMIN") is True
        assert await sanction.is_permissioned(
            sanction.sequence(needs_admin, Approval.deny("closed")), admin, "admin"
        ) is False
