"""
运行前依赖检查

在任何阶段开始之前确认数据处理解释器可用。
HTTP 客户端（httpx）是包的安装依赖，导入本包时即已保证，不在这里检查。
"""

from __future__ import annotations

import shutil
from typing import Callable, Iterable, Optional

from ..config import logger
from ..errors import MissingDependencyError


def check_dependencies(
    executables: Iterable[str],
    which: Callable[[str], Optional[str]] = shutil.which,
) -> None:
    """
    检查所需的可执行文件。

    Args:
        executables: 必须在 PATH 中找到的可执行文件
        which: 可执行文件查找函数（测试时可替换）

    Raises:
        MissingDependencyError: 第一个缺失的可执行文件
    """
    for executable in executables:
        if which(executable) is None:
            raise MissingDependencyError(executable, hint=f"Please install {executable} or add it to PATH.")
        logger.debug(f"Found executable: {executable}")
