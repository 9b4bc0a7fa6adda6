"""Tests for interview role definitions."""

import pytest

from interview_tracker.core.errors import NotFoundError, ValidationError
from interview_tracker.roles.service import DEFAULT_ROLES, RoleService
from interview_tracker.storage.memory import InMemoryDocumentStore


class TestRoleService:
    """Test cases for RoleService."""

    @pytest.fixture
    def service(self):
        return RoleService(InMemoryDocumentStore())

    @pytest.mark.asyncio
    async def test_seed_default_roles_once(self, service):
        created = await service.seed_default_roles()
        assert len(created) == len(DEFAULT_ROLES) == 5

        assert await service.seed_default_roles() == []
        roles = await service.list_active_roles()
        assert {role.name for role in roles} == {definition["name"] for definition in DEFAULT_ROLES}

    @pytest.mark.asyncio
    async def test_seeded_roles_have_prompts(self, service):
        await service.seed_default_roles()

        role = await service.find_by_name("DevOps Engineer")

        assert [c.name for c in role.categories] == ["Technical", "Behavioral"]
        assert "CI/CD" in role.find_category("technical").ai_prompt

    @pytest.mark.asyncio
    async def test_create_and_get(self, service):
        role = await service.create_role(
            "Mobile Developer",
            "Native and cross-platform apps",
            [{"name": "Technical", "aiPrompt": "Ask about app lifecycles"}],
            created_by="admin",
        )

        fetched = await service.get_role(role.id)
        assert fetched.name == "Mobile Developer"
        assert fetched.created_by == "admin"
        assert fetched.get_category(role.categories[0].id).ai_prompt == "Ask about app lifecycles"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, service):
        await service.create_role("QA Engineer", "Testing")
        with pytest.raises(ValidationError):
            await service.create_role("QA Engineer", "Testing again")

    @pytest.mark.asyncio
    async def test_invalid_category_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_role("QA Engineer", "Testing", [{"name": "Technical"}])
        assert exc_info.value.errors

    @pytest.mark.asyncio
    async def test_update_role(self, service):
        role = await service.create_role("QA Engineer", "Testing")
        await service.create_role("SRE", "Reliability")

        updated = await service.update_role(role.id, description="Quality assurance")
        assert updated.description == "Quality assurance"
        assert (await service.get_role(role.id)).description == "Quality assurance"

        with pytest.raises(ValidationError):
            await service.update_role(role.id, name="SRE")

    @pytest.mark.asyncio
    async def test_deactivate_hides_role(self, service):
        role = await service.create_role("QA Engineer", "Testing")

        deactivated = await service.deactivate_role(role.id)

        assert deactivated.is_active is False
        assert await service.list_active_roles() == []
        assert await service.find_by_name("QA Engineer") is None
        assert (await service.get_role(role.id)).is_active is False

    @pytest.mark.asyncio
    async def test_missing_role(self, service):
        with pytest.raises(NotFoundError):
            await service.get_role("missing")
