"""
Pipeline Orchestrator

协调整个训练 pipeline：
- 依赖检查
- 进入项目根目录
- clean -> featurize -> (准备模型配置 -> 检查 MLflow -> train)

以显式状态机实现：只允许向前转移，任何失败都进入吸收态 FAILED。
"""

from __future__ import annotations

import shutil
from enum import Enum
from typing import Callable, Optional

import httpx

from ..checks import check_dependencies, check_reachable
from ..config import logger
from ..errors import InvalidTransitionError, ProjectRootNotFoundError
from ..provision import ensure_config
from ..stages import CLEAN, FEATURIZE, TRAIN, ExternalProcessor, Stage, build_stages, default_processors, run_stage
from .state import PipelineConfig


class PipelineStatus(str, Enum):
    """Pipeline 状态。"""

    INIT = "init"
    DEPENDENCIES_CHECKED = "dependencies_checked"
    IN_PROJECT_ROOT = "in_project_root"
    CLEANED = "cleaned"
    FEATURIZED = "featurized"
    CONFIG_READY = "config_ready"
    SERVICE_READY = "service_ready"
    TRAINED = "trained"
    DONE = "done"
    FAILED = "failed"


# 固定的前向转移顺序
TRANSITIONS: tuple[PipelineStatus, ...] = (
    PipelineStatus.INIT,
    PipelineStatus.DEPENDENCIES_CHECKED,
    PipelineStatus.IN_PROJECT_ROOT,
    PipelineStatus.CLEANED,
    PipelineStatus.FEATURIZED,
    PipelineStatus.CONFIG_READY,
    PipelineStatus.SERVICE_READY,
    PipelineStatus.TRAINED,
    PipelineStatus.DONE,
)

TERMINAL_STATES = frozenset({PipelineStatus.DONE, PipelineStatus.FAILED})


class PipelineController:
    """
    Pipeline 控制器，负责按固定顺序驱动各个阶段。

    典型使用流程：
    1. PipelineConfig.from_overrides(): 构建不可变配置
    2. PipelineController(config).run(): 执行到 DONE，失败时抛出 PipelineError

    失败后不清理已生成的产物，它们保留在磁盘上供检查。
    """

    def __init__(
        self,
        config: PipelineConfig,
        processors: Optional[dict[str, ExternalProcessor]] = None,
        client: Optional[httpx.Client] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        """
        初始化 Pipeline 控制器。

        Args:
            config: Pipeline 配置
            processors: 各阶段的外部处理程序（默认为子进程；测试时可替换）
            client: HTTP 客户端，用于下载配置和检查 MLflow
            which: 可执行文件查找函数
        """
        self.config = config
        self.processors = processors
        self.client = client
        self.which = which
        self.state = PipelineStatus.INIT
        self.history: list[PipelineStatus] = [PipelineStatus.INIT]
        self.stages: dict[str, Stage] = {}

        self._actions: dict[PipelineStatus, Callable[[], None]] = {
            PipelineStatus.DEPENDENCIES_CHECKED: self._check_dependencies,
            PipelineStatus.IN_PROJECT_ROOT: self._enter_project_root,
            PipelineStatus.CLEANED: self._run_cleaning,
            PipelineStatus.FEATURIZED: self._run_feature_engineering,
            PipelineStatus.CONFIG_READY: self._prepare_model_config,
            PipelineStatus.SERVICE_READY: self._check_tracking_service,
            PipelineStatus.TRAINED: self._run_training,
            PipelineStatus.DONE: self._finish,
        }

    # ------------------------------------------------------------------
    # 状态机
    # ------------------------------------------------------------------

    def next_state(self) -> Optional[PipelineStatus]:
        """当前状态之后的唯一合法前向状态。"""
        if self.state in TERMINAL_STATES:
            return None
        return TRANSITIONS[TRANSITIONS.index(self.state) + 1]

    def transition(self, target: PipelineStatus) -> None:
        """
        转移到目标状态。

        Raises:
            InvalidTransitionError: 目标既不是下一状态也不是 FAILED，或当前已是终止态
        """
        if self.state in TERMINAL_STATES:
            raise InvalidTransitionError(f"Pipeline already finished in state '{self.state.value}'")
        if target is not PipelineStatus.FAILED and target is not self.next_state():
            raise InvalidTransitionError(f"Invalid transition: {self.state.value} -> {target.value}")

        self.state = target
        self.history.append(target)
        logger.debug(f"Pipeline state: {target.value}")

    def step(self) -> PipelineStatus:
        """执行下一次转移对应的动作；动作失败时进入 FAILED 并抛出异常。"""
        target = self.next_state()
        if target is None:
            raise InvalidTransitionError(f"Pipeline already finished in state '{self.state.value}'")

        try:
            self._actions[target]()
        except BaseException:
            self.transition(PipelineStatus.FAILED)
            raise

        self.transition(target)
        return target

    def run(self) -> PipelineStatus:
        """
        执行完整 pipeline。

        Returns:
            PipelineStatus: DONE

        Raises:
            PipelineError: 任意阶段失败（状态停在 FAILED）
        """
        while self.state not in TERMINAL_STATES:
            self.step()
        return self.state

    # ------------------------------------------------------------------
    # 各转移的动作
    # ------------------------------------------------------------------

    def _check_dependencies(self) -> None:
        check_dependencies([self.config.python_executable], which=self.which)

    def _enter_project_root(self) -> None:
        if not self.config.project_root.is_dir():
            raise ProjectRootNotFoundError(self.config.project_root)

        self.config = self.config.resolve()
        processors = self.processors or default_processors(self.config)
        self.stages = build_stages(self.config, processors)
        logger.debug(f"Project root: {self.config.project_root}")

    def _run_cleaning(self) -> None:
        logger.info("📦 Running data preprocessing...")
        run_stage(self.stages[CLEAN])
        logger.info(f"✅ Cleaned data available at {self.config.cleaned_output_path}")

    def _run_feature_engineering(self) -> None:
        logger.info("🔧 Running feature engineering...")
        run_stage(self.stages[FEATURIZE])
        logger.info(f"✅ Features generated at {self.config.featured_output_path}")
        logger.info(f"✅ Preprocessor saved at {self.config.preprocessor_artifact_path}")

    def _prepare_model_config(self) -> None:
        ensure_config(self.config.model_config_path, self.config.config_url, client=self.client)

    def _check_tracking_service(self) -> None:
        check_reachable(self.config.tracking_uri, client=self.client)

    def _run_training(self) -> None:
        logger.info(f"🧠 Training model with config: {self.config.model_config_path}")
        run_stage(self.stages[TRAIN])
        logger.info(f"✅ Model trained and saved to {self.config.trained_model_path}")

    def _finish(self) -> None:
        logger.info(f"🔍 Track experiments at {self.config.tracking_uri}")
