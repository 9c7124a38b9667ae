"""
hprice-pipeline CLI

使用 Typer 实现命令行接口。
"""

from typing import Annotated, Optional

import click
import typer
from typer.core import TyperCommand

from .config import MLFLOW_URI_DEFAULT, logger
from .errors import PipelineError
from .pipeline import PipelineConfig, PipelineController

HELP = (
    "Automates data preprocessing, feature engineering, and model training.\n\n"
    f"The MLflow Tracking URI defaults to {MLFLOW_URI_DEFAULT}."
)


class HelpOnUnknownOptionCommand(TyperCommand):
    """遇到未知选项时先打印完整帮助，再按 click 的方式报错退出。"""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption:
            click.echo(ctx.get_help())
            raise


# 初始化 Typer CLI app（单命令）
app = typer.Typer(add_completion=False)


@app.command(
    cls=HelpOnUnknownOptionCommand,
    help=HELP,
    context_settings={"help_option_names": ["-h", "--help"]},
)
def run(
    mlflow_uri: Annotated[
        Optional[str],
        typer.Option("-m", "--mlflow-uri", help=f"Set custom MLflow Tracking URI (default: {MLFLOW_URI_DEFAULT})"),
    ] = None,
) -> None:
    """运行完整 pipeline：clean -> featurize -> train。"""
    config = PipelineConfig.from_overrides(tracking_uri=mlflow_uri)
    controller = PipelineController(config)

    try:
        controller.run()
    except PipelineError as e:
        logger.error(f"❌ {e.message}")
        if e.hint:
            logger.error(f"➡️  {e.hint}")
        raise typer.Exit(1)
    except OSError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.error(f"❌ Interrupted (pipeline state: {controller.state.value})")
        raise typer.Exit(130)


def main():
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()
