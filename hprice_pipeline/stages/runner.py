"""
阶段执行

通用的阶段执行器，以及三个阶段（clean / featurize / train）的参数约定。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ..checks import validate_file
from ..config import logger
from ..errors import StageExecutionError
from .base import ExternalProcessor, SubprocessProcessor

if TYPE_CHECKING:
    from ..pipeline.state import PipelineConfig

CLEAN = "clean"
FEATURIZE = "featurize"
TRAIN = "train"

STAGE_NAMES = (CLEAN, FEATURIZE, TRAIN)


@dataclass(frozen=True)
class Stage:
    """
    一次阶段调用

    - processor: 外部处理程序
    - args: 传给处理程序的参数
    - expected_outputs: 处理程序成功返回后必须存在的产物
    """

    name: str
    processor: ExternalProcessor
    args: tuple[str, ...]
    expected_outputs: tuple[Path, ...] = field(default_factory=tuple)


def run_stage(stage: Stage) -> None:
    """
    执行一个阶段并检查其产物。

    Args:
        stage: 阶段定义

    Raises:
        StageExecutionError: 处理程序以非零状态退出
        ArtifactNotFoundError: 某个声明的产物不存在
    """
    returncode = stage.processor.invoke(list(stage.args))
    if returncode != 0:
        raise StageExecutionError(stage.name, returncode)

    for output in stage.expected_outputs:
        validate_file(output)
        logger.debug(f"Artifact present: {output}")


def default_processors(config: PipelineConfig) -> dict[str, ExternalProcessor]:
    """根据配置创建三个阶段的子进程处理程序。"""
    scripts = {
        CLEAN: config.processing_script,
        FEATURIZE: config.feature_script,
        TRAIN: config.training_script,
    }
    return {
        name: SubprocessProcessor(
            [config.python_executable, str(script)],
            cwd=config.project_root,
            timeout=config.stage_timeout,
            name=name,
        )
        for name, script in scripts.items()
    }


def _args(*pairs: tuple[str, object]) -> tuple[str, ...]:
    return tuple(item for flag, value in pairs for item in (flag, str(value)))


def clean_stage(config: PipelineConfig, processor: ExternalProcessor) -> Stage:
    """数据清洗：raw -> cleaned。"""
    return Stage(
        name=CLEAN,
        processor=processor,
        args=_args(
            ("--input", config.raw_input_path),
            ("--output", config.cleaned_output_path),
        ),
        expected_outputs=(Path(config.cleaned_output_path),),
    )


def featurize_stage(config: PipelineConfig, processor: ExternalProcessor) -> Stage:
    """特征工程：cleaned -> featured + preprocessor。"""
    return Stage(
        name=FEATURIZE,
        processor=processor,
        args=_args(
            ("--input", config.cleaned_output_path),
            ("--output", config.featured_output_path),
            ("--preprocessor", config.preprocessor_artifact_path),
        ),
        expected_outputs=(
            Path(config.featured_output_path),
            Path(config.preprocessor_artifact_path),
        ),
    )


def train_stage(config: PipelineConfig, processor: ExternalProcessor) -> Stage:
    """模型训练：featured + model config -> models/trained/house_price_model.pkl。"""
    return Stage(
        name=TRAIN,
        processor=processor,
        args=_args(
            ("--config", config.model_config_path),
            ("--data", config.featured_output_path),
            ("--models-dir", config.models_directory),
            ("--mlflow-tracking-uri", config.tracking_uri),
        ),
        expected_outputs=(config.trained_model_path,),
    )


def build_stages(config: PipelineConfig, processors: dict[str, ExternalProcessor]) -> dict[str, Stage]:
    """按固定顺序构建三个阶段。"""
    missing = [name for name in STAGE_NAMES if name not in processors]
    if missing:
        raise ValueError(f"Missing processors for stages: {missing}")
    return {
        CLEAN: clean_stage(config, processors[CLEAN]),
        FEATURIZE: featurize_stage(config, processors[FEATURIZE]),
        TRAIN: train_stage(config, processors[TRAIN]),
    }


__all__ = [
    "CLEAN",
    "FEATURIZE",
    "TRAIN",
    "STAGE_NAMES",
    "Stage",
    "run_stage",
    "default_processors",
    "build_stages",
    "clean_stage",
    "featurize_stage",
    "train_stage",
]
