"""Multivariate model DTOs

Anomaly Detector の list-models レスポンスを表すデータ転送オブジェクト。
フィールド名はサービスの JSON（camelCase）に合わせ、Python 側では
snake_case の属性名で参照する。
"""

from pydantic import BaseModel, ConfigDict, Field


class MADModel(BaseModel):
    """学習済み多変量モデルの概要"""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    model_id: str = Field(..., alias="modelId", description="モデルID")
    created_time: str = Field(..., alias="createdTime", description="作成日時")
    last_updated_time: str = Field(
        ..., alias="lastUpdatedTime", description="最終更新日時"
    )
    status: str = Field(..., description="モデルの状態（CREATED, READY など）")
    display_name: str | None = Field(None, alias="displayName", description="表示名")
    variables_count: int = Field(..., alias="variablesCount", description="変数の数")


class ListModelsResponse(BaseModel):
    """list-models レスポンス"""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    models: list[MADModel] = Field(default_factory=list, description="モデル一覧")
    current_count: int = Field(..., alias="currentCount", description="現在のモデル数")
    max_count: int = Field(..., alias="maxCount", description="作成可能な最大モデル数")
    next_link: str | None = Field(None, alias="nextLink", description="次ページのURL")

    @property
    def model_ids(self) -> list[str]:
        return [model.model_id for model in self.models]
