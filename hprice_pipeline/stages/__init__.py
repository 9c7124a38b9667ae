"""
阶段模块

支持：
- ExternalProcessor: 外部处理程序接口
- SubprocessProcessor: 子进程实现
- run_stage: 执行阶段并检查产物
"""
from .base import ExternalProcessor, SubprocessProcessor
from .runner import (
    CLEAN,
    FEATURIZE,
    STAGE_NAMES,
    TRAIN,
    Stage,
    build_stages,
    clean_stage,
    default_processors,
    featurize_stage,
    run_stage,
    train_stage,
)

__all__ = [
    'ExternalProcessor',
    'SubprocessProcessor',
    'Stage',
    'run_stage',
    'build_stages',
    'default_processors',
    'clean_stage',
    'featurize_stage',
    'train_stage',
    'CLEAN',
    'FEATURIZE',
    'TRAIN',
    'STAGE_NAMES',
]
