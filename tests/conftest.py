"""
pytest 配置和共享 fixtures
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

# 添加项目根目录到路径（以便 conftest 可以导入项目模块）
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.environ["PYTHONPATH"] = str(project_root) + os.pathsep + os.environ.get("PYTHONPATH", "")

import httpx  # noqa: E402
import pytest  # noqa: E402

from hprice_pipeline.pipeline import PipelineConfig  # noqa: E402
from hprice_pipeline.stages import CLEAN, FEATURIZE, TRAIN, ExternalProcessor  # noqa: E402

CONFIG_HOST = "gist.githubusercontent.com"
SAMPLE_MODEL_CONFIG = b'{"model": {"name": "house_price_model", "best_model": "RandomForest", "parameters": {"n_estimators": 100}}}'


class StubProcessor(ExternalProcessor):
    """
    测试用处理程序

    记录每次调用；返回 0 时把 ``writes`` 中各参数指向的文件写出。
    输入文件（--input）不存在时与真实脚本一样以 1 退出。
    """

    def __init__(self, name, writes=(), extra_outputs=None, returncode=0, call_log=None):
        self.name = name
        self.writes = writes
        self.extra_outputs = extra_outputs
        self.returncode = returncode
        self.calls = []
        self.call_log = call_log if call_log is not None else []

    def invoke(self, args):
        args = list(args)
        self.calls.append(args)
        self.call_log.append(self.name)
        options = dict(zip(args[::2], args[1::2]))

        if "--input" in options and not Path(options["--input"]).exists():
            return 1
        if self.returncode != 0:
            return self.returncode

        outputs = [Path(options[flag]) for flag in self.writes]
        if self.extra_outputs is not None:
            outputs.extend(self.extra_outputs(options))
        for output in outputs:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(f"{self.name}\n")
        return 0


def trained_model_output(options):
    return [Path(options["--models-dir"], "trained", "house_price_model.pkl")]


def make_processors(call_log=None, clean_rc=0, featurize_rc=0, train_rc=0):
    """创建三个阶段的 stub 处理程序。"""
    call_log = call_log if call_log is not None else []
    return {
        CLEAN: StubProcessor(CLEAN, writes=("--output",), returncode=clean_rc, call_log=call_log),
        FEATURIZE: StubProcessor(
            FEATURIZE, writes=("--output", "--preprocessor"), returncode=featurize_rc, call_log=call_log
        ),
        TRAIN: StubProcessor(TRAIN, extra_outputs=trained_model_output, returncode=train_rc, call_log=call_log),
    }


class HttpStub:
    """
    httpx.MockTransport 包装

    按 host 区分：配置下载地址与 MLflow 地址。
    """

    def __init__(self, config_status=200, config_body=SAMPLE_MODEL_CONFIG, tracking_status=200, tracking_error=None):
        self.config_status = config_status
        self.config_body = config_body
        self.tracking_status = tracking_status
        self.tracking_error = tracking_error
        self.requests = []
        self.client = httpx.Client(transport=httpx.MockTransport(self._handle))

    @property
    def config_requests(self):
        return [r for r in self.requests if r.url.host == CONFIG_HOST]

    @property
    def tracking_requests(self):
        return [r for r in self.requests if r.url.host != CONFIG_HOST]

    def _handle(self, request):
        self.requests.append(request)
        if request.url.host == CONFIG_HOST:
            return httpx.Response(self.config_status, content=self.config_body)
        if self.tracking_error is not None:
            raise self.tracking_error(f"Connection refused: {request.url}", request=request)
        return httpx.Response(self.tracking_status, text="<html>MLflow</html>")


@pytest.fixture
def temp_dir():
    """创建临时目录。"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def project_dir(temp_dir):
    """创建带 raw 数据的项目目录结构。"""
    root = temp_dir / "hprice-predictor"
    for sub in ("data/raw", "data/processed", "models", "configs"):
        (root / sub).mkdir(parents=True)
    (root / "data/raw/house_data.csv").write_text("price,sqft,bedrooms\n250000,1400,3\n")
    return root


@pytest.fixture
def model_config(project_dir):
    """已存在的模型配置。"""
    path = project_dir / "configs/model_config.yaml"
    path.write_bytes(SAMPLE_MODEL_CONFIG)
    return path


@pytest.fixture
def pipeline_config(project_dir):
    """指向临时项目目录的配置。"""
    return PipelineConfig.from_overrides(project_root=project_dir)


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def processors(call_log):
    return make_processors(call_log)


@pytest.fixture
def http_ok():
    stub = HttpStub()
    yield stub
    stub.client.close()


def found(name):
    """which() 替身：所有可执行文件都存在。"""
    return f"/usr/bin/{name}"
