"""
Pipeline Orchestrator

统一入口，协调整个训练 pipeline：
- 构建不可变配置（PipelineConfig）
- 按固定顺序执行 clean / featurize / train
- 在训练前准备模型配置并检查 MLflow
"""

from .orchestrator import PipelineController, PipelineStatus
from .state import PipelineConfig

__all__ = ["PipelineConfig", "PipelineController", "PipelineStatus"]
