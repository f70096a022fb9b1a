"""Shared helpers for building rig history fixtures in tests."""

from app.models.part import Part, PartType
from app.services.container import ServiceContainer
from app.utils.partial_date import PartialDate


def pd(value: str) -> PartialDate:
    """Parse ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` into a PartialDate."""
    components = [int(component) for component in value.split("-")]
    return PartialDate.from_parts(*components)


def add_part(
    container: ServiceContainer,
    type: PartType | str,
    brand: str = "Generic",
    model: str | None = None,
    acquired: str | None = None,
    notes: str = "",
) -> Part:
    """Create a part through the part service."""
    part_type = PartType(type)
    return container.part_service().add_part(
        brand=brand,
        model=model or f"{part_type.value.upper()} model",
        type=part_type,
        acquired=pd(acquired) if acquired else None,
        notes=notes,
    )


def connect(container: ServiceContainer, part: Part, motherboard: Part, when: str, keep_existing: bool = False):
    return container.connection_service().connect_part(
        part.id, motherboard.id, pd(when), keep_existing=keep_existing
    )


def disconnect(container: ServiceContainer, part: Part, when: str):
    return container.connection_service().disconnect_part_by_id(part.id, pd(when))


def create_part(client, type: str, brand: str = "Generic", model: str = "Model", **extra) -> dict:
    """Create a part through the REST API and return its JSON body."""
    response = client.post("/api/parts", json={"brand": brand, "model": model, "type": type, **extra})
    assert response.status_code == 201, response.json
    return response.json
