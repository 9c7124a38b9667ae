"""
MLflow 可达性检查

训练前对 tracking URI 发起一次 GET 请求。不重试，不负责启动服务。
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..config import MLFLOW_PORT_DEFAULT, logger
from ..errors import ServiceUnreachableError


def start_hint(uri: str) -> str:
    """生成启动 MLflow 的提示命令。"""
    try:
        port = httpx.URL(uri).port or MLFLOW_PORT_DEFAULT
    except httpx.InvalidURL:
        port = MLFLOW_PORT_DEFAULT
    return f"Please start MLflow with: mlflow ui --port {port}"


def check_reachable(uri: str, client: Optional[httpx.Client] = None) -> None:
    """
    检查 tracking 服务是否可达。

    Args:
        uri: MLflow tracking URI
        client: HTTP 客户端（测试时可注入 MockTransport 客户端）

    Raises:
        ServiceUnreachableError: 连接失败或返回错误状态码（>= 400）
    """
    logger.info(f"🔍 Checking MLflow Tracking URI at {uri}...")

    owns_client = client is None
    client = client or httpx.Client()
    try:
        response = client.get(uri)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ServiceUnreachableError(uri, hint=start_hint(uri), reason=str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            client.close()

    if response.is_error:
        raise ServiceUnreachableError(uri, hint=start_hint(uri), reason=f"HTTP {response.status_code}")

    logger.info("✅ MLflow is up and running.")
