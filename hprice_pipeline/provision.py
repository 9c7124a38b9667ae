"""
模型配置准备

训练前确认模型配置存在；不存在时从固定地址下载默认配置。
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import yaml

from .config import logger
from .errors import ConfigDownloadError


def ensure_config(path: str | Path, url: str, client: Optional[httpx.Client] = None) -> bool:
    """
    确保模型配置文件存在（幂等）。

    已存在的文件不会被读取、校验或覆盖，也不会发起网络请求。
    下载的内容必须能解析为 YAML 映射（JSON 同样适用），然后原样写入。

    Args:
        path: 本地配置路径
        url: 默认配置的下载地址
        client: HTTP 客户端（测试时可注入 MockTransport 客户端）

    Returns:
        bool: 是否发生了下载

    Raises:
        ConfigDownloadError: 下载失败、状态码非 2xx 或内容不是映射
    """
    path = Path(path)
    if path.is_file():
        logger.debug(f"Model config found at {path}")
        return False

    logger.warning("⚠️  Config file not found. Downloading sample config...")

    owns_client = client is None
    client = client or httpx.Client(follow_redirects=True)
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ConfigDownloadError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ConfigDownloadError(url, str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            client.close()

    body = response.content
    try:
        parsed = yaml.safe_load(body)
    except yaml.YAMLError as e:
        raise ConfigDownloadError(url, f"response is not valid YAML/JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ConfigDownloadError(url, "response is not a configuration mapping")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(body)

    logger.info(f"✅ Config downloaded to {path}")
    return True
