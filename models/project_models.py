# models/project_models.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ProjectConfigInput(BaseModel):
    """
    ユーザーが入力するプロジェクト情報。
    すべて任意だが、Config として完成させるには name が必要。
    空文字は「未入力」として None に寄せる。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = None
    domain: Optional[str] = None
    description: Optional[str] = None
    primary_goal: Optional[str] = None
    source_url: Optional[str] = None
    component_urls: List[str] = Field(default_factory=list)

    @field_validator("name", "domain", "description", "primary_goal", "source_url")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("component_urls")
    @classmethod
    def _drop_blank_urls(cls, value: List[str]) -> List[str]:
        return [u.strip() for u in value if u and u.strip()]

    def missing_required_fields(self) -> List[str]:
        """Config 完成に必要で、まだ埋まっていない項目名。"""
        return [] if self.name else ["name"]
