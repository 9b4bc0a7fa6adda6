"""Interview role definitions and their question-generation prompts."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from interview_tracker.core.errors import NotFoundError, ValidationError
from interview_tracker.core.models import RoleCategory, RoleDefinition
from interview_tracker.storage.base import DESCENDING, ROLES, DocumentStore
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)


def _technical_and_behavioral(audience: str, technical: str, behavioral: str) -> List[Dict[str, str]]:
    return [
        {
            "name": "Technical",
            "description": f"Technical questions for {audience}",
            "ai_prompt": f"Generate technical interview questions for {audience} that assess {technical}",
        },
        {
            "name": "Behavioral",
            "description": f"Behavioral questions for {audience}",
            "ai_prompt": f"Generate behavioral interview questions for {audience} that assess {behavioral}",
        },
    ]


DEFAULT_ROLES: List[Dict[str, Any]] = [
    {
        "name": "Frontend Developer",
        "description": "Frontend development roles focusing on UI/UX and client-side technologies",
        "categories": _technical_and_behavioral(
            "frontend developers",
            "React, JavaScript, CSS, HTML, and modern frontend development skills",
            "teamwork, communication, problem-solving, and project management skills",
        ),
    },
    {
        "name": "Backend Developer",
        "description": "Backend development roles focusing on server-side technologies and databases",
        "categories": _technical_and_behavioral(
            "backend developers",
            "databases, APIs, system design, and server-side programming skills",
            "system thinking, collaboration, code quality, and technical leadership skills",
        ),
    },
    {
        "name": "Full Stack Developer",
        "description": "Full stack development roles requiring both frontend and backend skills",
        "categories": _technical_and_behavioral(
            "full stack developers",
            "both frontend and backend skills, system integration, and end-to-end development",
            "project ownership, technical decision-making, and cross-functional collaboration",
        ),
    },
    {
        "name": "DevOps Engineer",
        "description": "DevOps roles focusing on infrastructure, deployment, and operations",
        "categories": _technical_and_behavioral(
            "DevOps engineers",
            "CI/CD, containerization, cloud services, monitoring, and infrastructure automation",
            "incident management, reliability mindset, and collaboration with development teams",
        ),
    },
    {
        "name": "Data Scientist",
        "description": "Data science roles focusing on machine learning and data analysis",
        "categories": _technical_and_behavioral(
            "data scientists",
            "machine learning algorithms, statistics, data processing, and model evaluation",
            "analytical thinking, communication of insights, and ethical considerations in data science",
        ),
    },
]


class RoleService:
    """CRUD over role definitions. Deleting a role only deactivates it."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.logger = logger.bind(component="role_service")

    async def list_active_roles(self) -> List[RoleDefinition]:
        documents = await self.store.find(ROLES, {"is_active": True}, sort=[("created_at", DESCENDING)])
        return [RoleDefinition.model_validate(doc) for doc in documents]

    async def get_role(self, role_id: str) -> RoleDefinition:
        document = await self.store.find_one(ROLES, {"id": role_id})
        if document is None:
            raise NotFoundError("Interview role not found")
        return RoleDefinition.model_validate(document)

    async def find_by_name(self, name: str) -> Optional[RoleDefinition]:
        document = await self.store.find_one(ROLES, {"name": name, "is_active": True})
        return RoleDefinition.model_validate(document) if document else None

    async def create_role(
        self,
        name: str,
        description: str,
        categories: Optional[List[Any]] = None,
        created_by: Optional[str] = None,
    ) -> RoleDefinition:
        """Create a role; names are unique across active and inactive roles."""
        if await self.store.find_one(ROLES, {"name": name}) is not None:
            raise ValidationError(f"Interview role already exists: {name}", [{"field": "name", "value": name}])

        role = self._build_role(
            {"name": name, "description": description, "categories": categories or [], "created_by": created_by}
        )
        await self.store.insert_one(ROLES, role.model_dump())

        self.logger.info("Interview role created", role_id=role.id, name=role.name, categories=len(role.categories))
        return role

    async def update_role(
        self,
        role_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        categories: Optional[List[Any]] = None,
        is_active: Optional[bool] = None,
    ) -> RoleDefinition:
        role = await self.get_role(role_id)

        if name is not None and name != role.name:
            if await self.store.find_one(ROLES, {"name": name}) is not None:
                raise ValidationError(f"Interview role already exists: {name}", [{"field": "name", "value": name}])

        data = role.model_dump()
        for field, value in (("name", name), ("description", description), ("is_active", is_active)):
            if value is not None:
                data[field] = value
        if categories is not None:
            data["categories"] = categories

        updated = self._build_role(data)
        await self.store.replace_one(ROLES, {"id": role_id}, updated.model_dump())

        self.logger.info("Interview role updated", role_id=role_id)
        return updated

    async def deactivate_role(self, role_id: str) -> RoleDefinition:
        role = await self.get_role(role_id)
        await self.store.update_one(ROLES, {"id": role_id}, {"$set": {"is_active": False}})

        self.logger.info("Interview role deactivated", role_id=role_id)
        return role.model_copy(update={"is_active": False})

    async def seed_default_roles(self) -> List[RoleDefinition]:
        """Create the default roles that do not exist yet."""
        created = []
        for definition in DEFAULT_ROLES:
            if await self.store.find_one(ROLES, {"name": definition["name"]}) is None:
                created.append(await self.create_role(
                    definition["name"], definition["description"], definition["categories"]
                ))

        self.logger.info("Default interview roles seeded", created=len(created))
        return created

    def _build_role(self, data: Dict[str, Any]) -> RoleDefinition:
        try:
            data = {
                **data,
                "categories": [
                    c if isinstance(c, RoleCategory) else RoleCategory.model_validate(c)
                    for c in data.get("categories", [])
                ],
            }
            return RoleDefinition.model_validate(data)
        except PydanticValidationError as e:
            errors = [{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()]
            raise ValidationError("Invalid interview role", errors) from e
