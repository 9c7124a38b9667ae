"""
Pipeline 配置状态

启动时从默认值和命令行覆盖项构建一次，此后只读，显式传入每个组件。
"""

from __future__ import annotations

import sys
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from ..config import (
    CONFIGS_DIR,
    MLFLOW_URI_DEFAULT,
    MODEL_CONFIG_URL,
    MODELS_DIR,
    PROCESSED_DATA_DIR,
    PROJECT_ROOT,
    RAW_DATA_DIR,
    TRAINED_MODEL_FILENAME,
)

# 相对于项目根目录、需要在进入项目根目录时解析的字段
_RELATIVE_PATH_FIELDS = (
    "raw_input_path",
    "cleaned_output_path",
    "featured_output_path",
    "preprocessor_artifact_path",
    "model_config_path",
    "models_directory",
    "processing_script",
    "feature_script",
    "training_script",
)


@dataclass(frozen=True)
class PipelineConfig:
    """
    Pipeline 配置

    包含所有阶段共享的路径和 MLflow 地址：
    - 数据路径（raw / cleaned / featured）
    - 产物路径（preprocessor / model config / models 目录）
    - 外部处理程序（解释器 + 脚本）
    """

    project_root: Path = Path(PROJECT_ROOT)
    raw_input_path: Path = Path(RAW_DATA_DIR, "house_data.csv")
    cleaned_output_path: Path = Path(PROCESSED_DATA_DIR, "cleaned_house_data.csv")
    featured_output_path: Path = Path(PROCESSED_DATA_DIR, "featured_house_data.csv")
    preprocessor_artifact_path: Path = Path(MODELS_DIR, "trained", "preprocessor.pkl")
    model_config_path: Path = Path(CONFIGS_DIR, "model_config.yaml")
    models_directory: Path = Path(MODELS_DIR)
    tracking_uri: str = MLFLOW_URI_DEFAULT
    python_executable: str = sys.executable or "python"
    processing_script: Path = Path("src", "data", "run_processing.py")
    feature_script: Path = Path("src", "features", "engineer.py")
    training_script: Path = Path("src", "models", "train_model.py")
    config_url: str = MODEL_CONFIG_URL
    stage_timeout: float | None = None

    @classmethod
    def from_overrides(cls, tracking_uri: str | None = None, **overrides: Any) -> PipelineConfig:
        """
        从默认值和覆盖项创建配置。

        Args:
            tracking_uri: MLflow tracking URI（命令行 -m/--mlflow-uri）
            **overrides: 其他字段覆盖（主要用于测试）

        Returns:
            PipelineConfig: 不可变配置
        """
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown PipelineConfig fields: {sorted(unknown)}")

        if tracking_uri is not None:
            overrides["tracking_uri"] = tracking_uri
        for name in _RELATIVE_PATH_FIELDS + ("project_root",):
            if name in overrides:
                overrides[name] = Path(overrides[name])
        return cls(**overrides)

    @property
    def trained_model_path(self) -> Path:
        """训练阶段必须产出的模型文件。"""
        return Path(self.models_directory, "trained", TRAINED_MODEL_FILENAME)

    def resolve(self, root: str | Path | None = None) -> PipelineConfig:
        """
        将相对路径解析到项目根目录下。

        Args:
            root: 项目根目录（默认使用 self.project_root）

        Returns:
            PipelineConfig: 路径均为绝对路径的新配置
        """
        root = Path(root if root is not None else self.project_root).absolute()
        resolved = {name: root / getattr(self, name) for name in _RELATIVE_PATH_FIELDS}
        return replace(self, project_root=root, **resolved)

    def to_dict(self) -> dict[str, Any]:
        """转换为可打印的字典。"""
        return {k: str(v) if isinstance(v, Path) else v for k, v in asdict(self).items()}
