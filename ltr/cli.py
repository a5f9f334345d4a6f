#!filepath: ltr/cli.py
from typing import Optional

import typer
from rich import print
from rich.table import Table

from ltr import logs, __version__
from ltr.config.app_config import AppConfig
from ltr.training.types import PassResult
from ltr.utils.errors import LtrError

app = typer.Typer(help="Learning-to-rank training CLI")


def _load_config(config: Optional[str]) -> AppConfig:
    cfg = AppConfig.load(config)
    logs.configure(cfg.log)
    return cfg


def _render(rows: list[PassResult]) -> Table:
    table = Table(title="Passes")
    for col in ("phase", "iter", "metric", "value", "groups", "docs", "applied", "sec"):
        table.add_column(col)
    for r in rows:
        table.add_row(
            r.phase.value, str(r.iteration), r.metric_name, f"{r.metric:.6f}",
            str(r.groups), str(r.documents), str(r.applied), f"{r.elapsed:.3f}",
        )
    return table


def _fail(e: LtrError) -> None:
    # 配置 / 数据错误：不打印 traceback
    logs.error(f"[{e.__class__.__name__}] {e}")
    raise typer.Exit(code=1)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def train(
    config: Optional[str] = typer.Option(None, help="YAML config (default: bundled base.yml)"),
    train_data: Optional[str] = typer.Option(None, help="Override data.train_data"),
    eval_data: Optional[str] = typer.Option(None, help="Override data.eval_data"),
    test_data: Optional[str] = typer.Option(None, help="Override data.test_data"),
    model_dir: Optional[str] = typer.Option(None, help="Save the trained model here"),
):
    """
    Train, then (optionally) validate and test.
    """
    from ltr.workflows.offline_training import run_offline_training

    try:
        cfg = _load_config(config)
        if train_data:
            cfg.data.train_data = train_data
        if eval_data:
            cfg.data.eval_data = eval_data
        if test_data:
            cfg.data.test_data = test_data
        if model_dir:
            cfg.output.model_dir = model_dir

        print(
            f"[green]Training {cfg.training.algorithm} / {cfg.training.model} "
            f"on {cfg.data.train_data}[/green]"
        )
        report = run_offline_training(cfg)
    except LtrError as e:
        _fail(e)
        return

    rows = list(report.training)
    rows += [r for r in (report.validation, report.testing) if r is not None]
    print(_render(rows))


@app.command()
def evaluate(
    model_dir: str = typer.Option(..., help="Directory written by `train --model-dir`"),
    data: str = typer.Option(..., help="Dataset to score"),
    config: Optional[str] = typer.Option(None, help="YAML config (reader / metric settings)"),
):
    """
    Score a dataset with a saved model (TESTING phase, weights untouched).
    """
    from ltr.workflows.offline_training import evaluate_saved_model

    try:
        cfg = _load_config(config)
        result = evaluate_saved_model(cfg, model_dir, data)
    except LtrError as e:
        _fail(e)
        return

    print(_render([result]))


if __name__ == "__main__":
    app()

# python -m ltr.cli train --config my.yml
