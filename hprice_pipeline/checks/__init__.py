"""
前置/后置检查模块

提供：
- Preflight: 运行前依赖检查
- Artifacts: 阶段间的产物存在性检查
- Readiness: MLflow tracking 服务可达性检查
"""
from .artifacts import validate_file
from .preflight import check_dependencies
from .readiness import check_reachable

__all__ = [
    'check_dependencies',
    'check_reachable',
    'validate_file',
]
