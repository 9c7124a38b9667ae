"""
Pipeline 异常

所有异常都是致命的：没有重试、没有回退。CLI 捕获 ``PipelineError``，
输出 message（以及可选的 hint）到 stderr 并以非零状态退出。
"""

from __future__ import annotations

from pathlib import Path


class PipelineError(Exception):
    """
    Pipeline 异常基类

    Attributes:
        message: 简短、可读的错误信息
        hint: 给操作者的补救建议（可选）
    """

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class MissingDependencyError(PipelineError):
    """运行前所需的可执行文件或模块不存在。"""

    def __init__(self, dependency: str, hint: str | None = None):
        super().__init__(f"{dependency} is required but was not found. Aborting.", hint=hint)
        self.dependency = dependency


class ProjectRootNotFoundError(PipelineError):
    """项目根目录不存在。"""

    def __init__(self, project_root: str | Path):
        super().__init__(
            f"'{project_root}' directory not found.",
            hint="Please run this from the parent directory of the project.",
        )
        self.project_root = Path(project_root)


class StageExecutionError(PipelineError):
    """外部处理程序以非零状态退出（或超时）。"""

    def __init__(self, stage: str, returncode: int | None, reason: str | None = None):
        detail = reason or f"exited with status {returncode}"
        super().__init__(f"Stage '{stage}' failed: {detail}")
        self.stage = stage
        self.returncode = returncode


class ArtifactNotFoundError(PipelineError, FileNotFoundError):
    """阶段结束后，声明的产物不存在。"""

    def __init__(self, path: str | Path):
        PipelineError.__init__(self, f"File not found: {path}")
        self.path = Path(path)
        self.filename = str(path)


class ConfigDownloadError(PipelineError):
    """默认模型配置下载失败。"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to download config from {url}: {reason}")
        self.url = url


class ServiceUnreachableError(PipelineError):
    """MLflow tracking 服务不可达。"""

    def __init__(self, uri: str, hint: str | None = None, reason: str | None = None):
        message = f"MLflow Tracking Server is not reachable at {uri}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, hint=hint)
        self.uri = uri


class InvalidTransitionError(PipelineError):
    """状态机收到非法（回退/跳跃）转移。"""
