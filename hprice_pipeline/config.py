"""
全局配置模块

借鉴 BambooHepMl 的配置管理方式，提供：
- 目录管理
- Pipeline 默认值（项目结构、MLflow 地址、默认模型配置）
- 日志配置
"""
import logging
import logging.config
import os
import sys
from pathlib import Path

# 目录配置
ROOT_DIR = Path(__file__).parent.parent.absolute()
LOGS_DIR = Path(os.environ.get("HPRICE_PIPELINE_LOGS_DIR", Path(ROOT_DIR, "logs")))
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# 项目结构（相对于项目根目录，不可配置）
PROJECT_ROOT = "hprice-predictor"
RAW_DATA_DIR = "data/raw"
PROCESSED_DATA_DIR = "data/processed"
MODELS_DIR = "models"
CONFIGS_DIR = "configs"

TRAINED_MODEL_FILENAME = "house_price_model.pkl"

# MLflow 配置
MLFLOW_URI_DEFAULT = "http://localhost:5555"
MLFLOW_PORT_DEFAULT = 5555

# 默认模型配置（本地缺失时下载）
MODEL_CONFIG_URL = (
    "https://gist.githubusercontent.com/initcron/702de323bab9a3b85ee3cde295d06d49/raw/"
    "fcf5e2bf6d3dc6739d2456a556a14ef68e929d75/model_config.json"
)


class _BelowErrorFilter(logging.Filter):
    """只放行 ERROR 以下的记录（ERROR 及以上走 stderr）。"""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


# 日志配置
logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "below_error": {"()": _BelowErrorFilter},
    },
    "formatters": {
        "minimal": {"format": "%(message)s"},
        "detailed": {
            "format": "%(levelname)s %(asctime)s [%(name)s:%(filename)s:%(funcName)s:%(lineno)d]\n%(message)s\n"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "minimal",
            "filters": ["below_error"],
            "level": logging.DEBUG,
        },
        "console_error": {
            "class": "logging.StreamHandler",
            "stream": sys.stderr,
            "formatter": "minimal",
            "level": logging.ERROR,
        },
        "info": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": Path(LOGS_DIR, "info.log"),
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 10,
            "formatter": "detailed",
            "level": logging.INFO,
        },
        "error": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": Path(LOGS_DIR, "error.log"),
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 10,
            "formatter": "detailed",
            "level": logging.ERROR,
        },
    },
    "root": {
        "handlers": ["console", "console_error", "info", "error"],
        "level": logging.INFO,
        "propagate": True,
    },
}

# 初始化日志
logging.config.dictConfig(logging_config)
logger = logging.getLogger()

# 导出常用配置
__all__ = [
    'logger',
    'LOGS_DIR',
    'PROJECT_ROOT',
    'MLFLOW_URI_DEFAULT',
    'MODEL_CONFIG_URL',
    'TRAINED_MODEL_FILENAME',
]
