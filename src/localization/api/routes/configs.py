import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Query

from localization.api.deps import ConfigServiceDep
from localization.configs import (
    ThirdPartyConfigCreate,
    ThirdPartyConfigFilter,
    ThirdPartyConfigPublic,
    ThirdPartyConfigUpdate,
)
from localization.core.base_models import Message

router = APIRouter(prefix="/configs", tags=["configs"])


@router.post("/", response_model=ThirdPartyConfigPublic)
def create_config(service: ConfigServiceDep, config_in: ThirdPartyConfigCreate) -> Any:
    return service.create(config_in)


@router.get("/", response_model=list[ThirdPartyConfigPublic])
def read_configs(
    service: ConfigServiceDep,
    code: str | None = None,
    config_type: Annotated[str | None, Query(alias="type")] = None,
    group: str | None = None,
) -> Any:
    """List configuration entries; `code` matches as a substring."""
    return service.find_all(
        ThirdPartyConfigFilter(code=code, type=config_type, group=group)
    )


@router.get("/code/{code}", response_model=ThirdPartyConfigPublic)
def read_config_by_code(service: ConfigServiceDep, code: str) -> Any:
    return service.get(code)


@router.get("/group/{group}", response_model=list[ThirdPartyConfigPublic])
def read_configs_by_group(service: ConfigServiceDep, group: str) -> Any:
    return service.find_by_group(group)


@router.get("/type/{config_type}", response_model=list[ThirdPartyConfigPublic])
def read_configs_by_type(service: ConfigServiceDep, config_type: str) -> Any:
    return service.find_by_type(config_type)


@router.get("/{config_id}", response_model=ThirdPartyConfigPublic)
def read_config(service: ConfigServiceDep, config_id: uuid.UUID) -> Any:
    return service.find_by_id(config_id)


@router.put("/{config_id}", response_model=ThirdPartyConfigPublic)
def update_config(
    service: ConfigServiceDep, config_id: uuid.UUID, config_in: ThirdPartyConfigUpdate
) -> Any:
    return service.update(config_id, config_in)


@router.delete("/{config_id}", response_model=Message)
def delete_config(service: ConfigServiceDep, config_id: uuid.UUID) -> Any:
    service.remove(config_id)
    return Message(message="Configuration deleted successfully")
