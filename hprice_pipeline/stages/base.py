"""
外部处理程序基类

定义阶段处理程序接口：参数列表输入，退出状态输出。
编排器只依赖这个接口，不关心处理程序由哪种语言或二进制实现。
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from ..config import logger
from ..errors import StageExecutionError


class ExternalProcessor(ABC):
    """
    外部处理程序基类

    所有处理程序都应该继承此类，实现：
    - invoke: 同步执行并返回退出状态
    """

    name: str = "processor"

    @abstractmethod
    def invoke(self, args: Sequence[str]) -> int:
        """执行处理程序，阻塞直到结束，返回退出状态。"""
        pass


class SubprocessProcessor(ExternalProcessor):
    """
    子进程处理程序

    以 ``command + args`` 启动子进程，标准输出/错误直接继承给操作者。
    """

    def __init__(
        self,
        command: Sequence[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
        name: str | None = None,
    ):
        """
        初始化子进程处理程序。

        Args:
            command: 命令前缀（如 ["python", "src/data/run_processing.py"]）
            cwd: 工作目录（项目根目录）
            timeout: 超时秒数，None 表示不限制
            name: 处理程序名称（用于日志）
        """
        self.command = [str(c) for c in command]
        self.cwd = cwd
        self.timeout = timeout
        self.name = name or Path(self.command[-1]).name

    def invoke(self, args: Sequence[str]) -> int:
        cmd = self.command + [str(a) for a in args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, cwd=self.cwd, timeout=self.timeout, check=False)
        except subprocess.TimeoutExpired as e:
            raise StageExecutionError(self.name, None, reason=f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise StageExecutionError(self.name, None, reason=f"could not be started: {e}") from e
        return result.returncode

    def __repr__(self) -> str:
        return f"SubprocessProcessor(command={self.command!r}, cwd={self.cwd!r}, timeout={self.timeout!r})"
