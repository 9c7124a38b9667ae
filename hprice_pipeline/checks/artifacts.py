"""
产物检查

阶段之间唯一的后置条件：只检查文件是否存在，不检查内容或格式。
"""

from __future__ import annotations

from pathlib import Path

from ..errors import ArtifactNotFoundError


def validate_file(path: str | Path) -> Path:
    """
    确认阶段产物存在。

    Args:
        path: 产物路径

    Returns:
        Path: 产物路径

    Raises:
        ArtifactNotFoundError: 路径不存在或不是普通文件
    """
    path = Path(path)
    if not path.is_file():
        raise ArtifactNotFoundError(path)
    return path
