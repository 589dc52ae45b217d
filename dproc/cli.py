"""
dproc CLI 命令行入口

提供以下命令：
- export: 将 Markdown 导出为 HTML / PDF / MDX
- init: 交互式初始化配置
- config: 查看与修改配置
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import questionary
import typer

from . import __version__
from .config import (
    DEFAULT_MODELS,
    DEFAULT_OUTPUT_DIR,
    PROVIDERS,
    CliConfig,
    ConfigManager,
    LLMConfig,
    api_key_env_var,
    load_config,
    mask_secret,
    resolve_api_key,
    validate_config,
)
from .errors import ConfigError, DprocError
from .models import ExportFormat, ExportOutcome, ExportTarget, RenderOptions
from .pipeline import ExportDispatcher
from .render import PdfRenderer
from .render.pdf import DEFAULT_TIMEOUT
from .utils import Display, create_logger, create_spinner, setup_logging
from .utils.logger import console


app = typer.Typer(
    name="dproc",
    help="dproc - AI-powered data processing CLI",
    add_completion=False,
)

config_app = typer.Typer(help="查看与修改 dproc 配置", no_args_is_help=True)
app.add_typer(config_app, name="config")

log = create_logger("cli")

# 自定义样式
STYLE = questionary.Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:green"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
])


class SpinnerListener:
    """每个导出格式一个 spinner"""

    def __init__(self):
        self.spinner = create_spinner("")
        self.log = create_logger("export")

    def started(self, target: ExportTarget) -> None:
        self.spinner.start(f"正在导出 {target.format.value.upper()}...")

    def finished(self, outcome: ExportOutcome) -> None:
        if outcome.succeeded:
            self.spinner.succeed(f"已导出: {outcome.path}")
        else:
            self.spinner.fail(f"导出 {outcome.format.value.upper()} 失败")
            self.log.error(outcome.error)


@app.command("export")
def export(
    input_file: Path = typer.Argument(
        ...,
        help="输入的 Markdown 文件路径",
        exists=True,
        dir_okay=False,
    ),
    html: bool = typer.Option(False, "--html", help="导出 HTML"),
    pdf: bool = typer.Option(False, "--pdf", help="导出 PDF"),
    mdx: bool = typer.Option(False, "--mdx", help="导出 MDX"),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        help="文档标题（默认 Report）",
    ),
    author: Optional[str] = typer.Option(
        None,
        "--author",
        help="文档作者",
    ),
    toc: bool = typer.Option(False, "--toc", help="生成目录"),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        help="PDF 渲染时页面加载与打印的超时（秒）",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    将 Markdown 导出为其他格式

    输出文件与输入文件同目录、同名，例如 report.md → report.html / report.pdf / report.mdx。
    某个格式失败不会影响其他格式；全部失败时退出码为 1。
    """
    spinner = create_spinner("Loading configuration...")
    spinner.start()
    try:
        load_config(env_file)
    except ConfigError as e:
        spinner.fail("加载配置失败")
        log.error(str(e))
        raise typer.Exit(code=1)
    spinner.succeed()

    formats = [
        fmt for fmt, enabled in (
            (ExportFormat.HTML, html),
            (ExportFormat.PDF, pdf),
            (ExportFormat.MDX, mdx),
        )
        if enabled
    ]
    options = RenderOptions(title=title, author=author, include_toc=toc)
    dispatcher = ExportDispatcher(pdf_renderer=PdfRenderer(timeout=timeout))

    try:
        targets = dispatcher.plan(input_file, formats)
        Display.section("Export")
        report = dispatcher.export(input_file, formats, options, listener=SpinnerListener())
    except DprocError as e:
        log.error(str(e))
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("\n[yellow]已取消[/yellow]")
        raise typer.Exit(code=1)

    Display.empty()
    if report.all_failed:
        Display.welcome("[red]✗ 导出失败[/red]")
    elif report.failed:
        Display.welcome("[yellow]⚠ 导出部分完成[/yellow]")
    else:
        Display.welcome("[green]✓ 导出完成！[/green]")

    if report.succeeded:
        console.print("已导出文件:")
        Display.list(str(o.path) for o in report.succeeded)

    if report.failed:
        console.print("\n失败的格式:")
        Display.list(
            (f"{o.format.value}: {o.error}" for o in report.failed),
            bullet="[red]✗[/red]",
        )

    log.debug("导出目标 %d 个，成功 %d 个", len(targets), len(report.succeeded))

    if report.all_failed:
        raise typer.Exit(code=1)


def prompt_llm_settings() -> dict[str, str] | None:
    """交互式询问 LLM 服务商、模型和输出目录，取消时返回 None"""
    provider = questionary.select(
        "选择 LLM 服务商：",
        choices=[questionary.Choice(label, value=key) for key, label in PROVIDERS.items()],
        style=STYLE,
    ).ask()
    if not provider:
        return None

    model = questionary.text(
        "模型名称：",
        default=DEFAULT_MODELS[provider],
        style=STYLE,
    ).ask()
    if not model:
        return None

    output_dir = questionary.text(
        "默认输出目录：",
        default=DEFAULT_OUTPUT_DIR,
        style=STYLE,
    ).ask()
    if output_dir is None:
        return None

    return {"provider": provider, "model": model, "output_dir": output_dir or DEFAULT_OUTPUT_DIR}


@app.command("init")
def init() -> None:
    """
    交互式初始化 dproc 配置

    API Key 不会写入配置文件，请通过环境变量（如 OPENAI_API_KEY）或 .env 提供。
    """
    Display.welcome("初始化 dproc CLI")
    manager = ConfigManager()

    try:
        existing = manager.load()
    except ConfigError as e:
        log.warn(f"现有配置无效，将重新初始化: {e}")
        existing = CliConfig()

    if existing.llm and existing.llm.provider:
        overwrite = questionary.confirm(
            "配置已存在，是否覆盖？",
            default=False,
            style=STYLE,
        ).ask()
        if not overwrite:
            console.print("\n配置未修改")
            return

    Display.section("配置 LLM 服务商")
    settings = prompt_llm_settings()
    if settings is None:
        console.print("[yellow]已取消[/yellow]")
        raise typer.Exit(code=1)

    config = CliConfig(
        llm=LLMConfig(provider=settings["provider"], model=settings["model"]),
        default_output_dir=settings["output_dir"],
    )
    try:
        path = manager.save(config)
    except ConfigError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    Display.welcome("[green]✓ dproc CLI 初始化完成！[/green]")
    log.info(f"配置已保存到: {path}")
    log.info(f"请设置环境变量 {api_key_env_var(settings['provider'])} 提供 API Key")
    Display.empty()

    console.print("下一步：")
    Display.list([
        "运行 dproc config validate 检查配置",
        "运行 dproc export <file.md> --html --pdf --mdx 导出文档",
    ])


def _load_or_exit(manager: ConfigManager) -> CliConfig:
    try:
        return manager.load()
    except ConfigError as e:
        log.error(str(e))
        raise typer.Exit(code=1)


@config_app.command("show")
def config_show() -> None:
    """显示当前配置（API Key 已遮盖）"""
    config = _load_or_exit(ConfigManager())
    data = config.model_dump(by_alias=True, exclude_none=True)
    if data.get("llm", {}).get("apiKey"):
        data["llm"]["apiKey"] = mask_secret(data["llm"]["apiKey"])

    Display.section("当前配置")
    console.print_json(json.dumps(data, ensure_ascii=False))


@config_app.command("path")
def config_path() -> None:
    """显示配置文件路径"""
    console.print(str(ConfigManager().config_path), highlight=False)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="配置键，如 llm.provider、llm.model、defaultOutputDir"),
    value: str = typer.Argument(..., help="配置值"),
) -> None:
    """修改单个配置项"""
    try:
        ConfigManager().set_value(key, value)
    except ConfigError as e:
        log.error(str(e))
        raise typer.Exit(code=1)
    log.success(f"{key} = {value}")


@config_app.command("validate")
def config_validate(
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """检查当前配置是否有效"""
    spinner = create_spinner("Validating configuration...")
    spinner.start()
    try:
        config = load_config(env_file)
    except ConfigError as e:
        spinner.fail("配置校验失败")
        log.error(str(e))
        raise typer.Exit(code=1)

    problems = validate_config(config)
    if problems:
        spinner.fail("配置校验失败")
        Display.list(problems, bullet="[red]✗[/red]")
        raise typer.Exit(code=1)
    spinner.succeed("配置有效")


@config_app.command("get-key")
def config_get_key(
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """显示当前服务商的 API Key（遮盖）"""
    try:
        config = load_config(env_file)
    except ConfigError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    if not config.llm or not config.llm.provider:
        log.warn("尚未配置 LLM 服务商，请运行 dproc init")
        raise typer.Exit(code=1)

    key = resolve_api_key(config)
    provider = config.llm.provider
    if key:
        console.print(f"[green]✓ {provider} API Key: {mask_secret(key)}[/green]")
    else:
        console.print(f"[yellow]⚠ 未找到 {provider} 的 API Key（{api_key_env_var(provider)}）[/yellow]")


def version_callback(value: bool) -> None:
    if value:
        console.print(f"dproc {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本号",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="输出调试日志",
    ),
) -> None:
    """
    dproc - AI-powered data processing CLI

    直接运行 dproc（不带参数）显示欢迎信息和帮助
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        Display.banner()
        console.print(ctx.get_help())


if __name__ == "__main__":
    app()
