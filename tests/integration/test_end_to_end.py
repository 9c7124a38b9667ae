"""
端到端测试

stub 处理程序 + MockTransport，验证完整 pipeline 的行为。
"""

import httpx
import pytest
from conftest import HttpStub, found

from hprice_pipeline.errors import ConfigDownloadError, ServiceUnreachableError
from hprice_pipeline.pipeline import PipelineController, PipelineStatus


def _artifacts(config):
    resolved = config.resolve()
    return {
        "cleaned": resolved.cleaned_output_path,
        "featured": resolved.featured_output_path,
        "preprocessor": resolved.preprocessor_artifact_path,
        "model": resolved.trained_model_path,
    }


def test_successful_pipeline(pipeline_config, processors, model_config, call_log):
    """raw 数据、配置存在，MLflow 可达：四个产物全部生成。"""
    print("=" * 60)
    print("测试: 完整 pipeline")
    print("=" * 60)

    http = HttpStub()
    controller = PipelineController(pipeline_config, processors=processors, client=http.client, which=found)

    assert controller.run() is PipelineStatus.DONE

    for name, path in _artifacts(pipeline_config).items():
        assert path.is_file(), name
    assert call_log == ["clean", "featurize", "train"]
    # 配置已存在，不下载
    assert http.config_requests == []
    assert len(http.tracking_requests) == 1


@pytest.mark.parametrize(
    "http",
    [HttpStub(tracking_status=503), HttpStub(tracking_error=httpx.ConnectError)],
    ids=["http-503", "connection-refused"],
)
def test_unreachable_tracking_service_skips_training(pipeline_config, processors, model_config, http):
    controller = PipelineController(pipeline_config, processors=processors, client=http.client, which=found)

    with pytest.raises(ServiceUnreachableError) as exc_info:
        controller.run()

    assert "mlflow ui --port 5555" in exc_info.value.hint
    assert controller.history[-2:] == [PipelineStatus.CONFIG_READY, PipelineStatus.FAILED]
    assert processors["train"].calls == []

    artifacts = _artifacts(pipeline_config)
    assert not artifacts["model"].exists()
    # 之前阶段的产物保留
    assert artifacts["cleaned"].exists()
    assert artifacts["featured"].exists()


def test_config_download_404_skips_training(pipeline_config, processors):
    http = HttpStub(config_status=404, config_body=b"404: Not Found")
    controller = PipelineController(pipeline_config, processors=processors, client=http.client, which=found)

    with pytest.raises(ConfigDownloadError):
        controller.run()

    assert controller.history[-2:] == [PipelineStatus.FEATURIZED, PipelineStatus.FAILED]
    assert processors["train"].calls == []
    assert http.tracking_requests == []
    assert not pipeline_config.resolve().model_config_path.exists()
    assert not _artifacts(pipeline_config)["model"].exists()


def test_missing_config_is_downloaded_then_trained(pipeline_config, processors):
    http = HttpStub()
    controller = PipelineController(pipeline_config, processors=processors, client=http.client, which=found)

    controller.run()

    assert len(http.config_requests) == 1
    assert _artifacts(pipeline_config)["model"].is_file()


def test_trainer_without_model_output_fails(pipeline_config, model_config, call_log):
    from conftest import StubProcessor, make_processors

    processors = make_processors(call_log)
    processors["train"] = StubProcessor("train", call_log=call_log)
    http = HttpStub()
    controller = PipelineController(pipeline_config, processors=processors, client=http.client, which=found)

    with pytest.raises(FileNotFoundError):
        controller.run()

    assert controller.history[-2:] == [PipelineStatus.SERVICE_READY, PipelineStatus.FAILED]
