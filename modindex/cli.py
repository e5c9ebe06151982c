"""
CLI 模块

命令行接口实现。
"""

import asyncio
import functools
import json
import sys
from typing import Any, Optional

import click
from loguru import logger

from modindex.exceptions import ModIndexError
from modindex.logger import setup_logger
from modindex.models import MatcherQuery, ModIndexConfig, VersionStatus
from modindex.orchestrator import ModIndexOrchestrator
from modindex.utils import load_config


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def query_options(func):
    """兼容性查询相关选项"""
    func = click.option(
        "--prerelease/--no-prerelease", default=None, help="是否接受预发布版本"
    )(func)
    func = click.option("-e", "--engine", help="引擎版本，例如 4.2.0")(func)
    func = click.option(
        "-p", "--platform", "platforms", multiple=True, help="目标平台（可多次使用或逗号分隔）"
    )(func)
    return func


def handle_errors(func):
    """把 ModIndexError 及未预期的异常转换为 click 异常"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except ModIndexError as e:
            logger.debug(f"命令失败: {e.to_dict()}")
            raise click.ClickException(str(e))
        except Exception as e:
            logger.exception(f"运行时错误: {e}")
            raise click.ClickException(f"运行时错误: {e}")

    return wrapper


def build_query(
    config: ModIndexConfig,
    platforms: tuple,
    engine: Optional[str],
    prerelease: Optional[bool],
) -> MatcherQuery:
    """命令行选项覆盖配置中的查询条件"""
    base = config.query
    query = MatcherQuery.build(
        platforms=",".join(platforms) if platforms else None,
        engine=engine,
        accept_prerelease=base.accept_prerelease if prerelease is None else prerelease,
    )
    return MatcherQuery(
        platforms=query.platforms if platforms else base.platforms,
        engine=query.engine if engine else base.engine,
        accept_prerelease=query.accept_prerelease,
    )


def load_orchestrator(config: ModIndexConfig) -> ModIndexOrchestrator:
    """加载索引"""
    sources = config.registry.sources
    if not sources:
        raise click.UsageError("请通过 --source 或配置文件指定索引快照")
    return asyncio.run(
        ModIndexOrchestrator.from_source(
            sources, config.registry.format, max_concurrent=config.max_concurrent
        )
    )


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件路径"
)
@click.option("-s", "--source", "sources", multiple=True, help="索引快照路径或 URL（可多次使用）")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version="0.1.0")
@click.pass_context
@handle_errors
def main(ctx: click.Context, config_path: Optional[str], sources: tuple, debug: bool):
    """ModIndex - 模组索引兼容性解析工具"""
    config = ModIndexConfig.from_dict(load_config(config_path) if config_path else {})
    if sources:
        config.registry.sources = list(sources)

    setup_logger(
        level="DEBUG" if debug or config.debug else None,
        sink=sys.stderr,
        log_file=config.log_file,
    )

    ctx.obj = config


@main.command()
@click.argument("mod_id")
@click.option("--major", type=int, help="限定模组版本的 major")
@click.option("--deps", is_flag=True, help="同时解析依赖闭包")
@query_options
@click.pass_obj
@handle_errors
def latest(config, mod_id, major, deps, platforms, engine, prerelease):
    """获取模组最新的兼容版本"""
    query = build_query(config, platforms, engine, prerelease)
    orchestrator = load_orchestrator(config)

    report = orchestrator.get_latest(mod_id, query, major=major, with_dependencies=deps)
    if report is None:
        raise click.ClickException(f"模组 {mod_id} 没有满足条件的版本")
    echo_json(report.to_dict())


@main.command()
@click.argument("mod_ids", nargs=-1, required=True)
@query_options
@click.pass_obj
@handle_errors
def batch(config, mod_ids, platforms, engine, prerelease):
    """批量获取最新兼容版本"""
    query = build_query(config, platforms, engine, prerelease)
    orchestrator = load_orchestrator(config)

    result = orchestrator.get_latest_batch(list(mod_ids), query)
    missing = [m for m in mod_ids if m not in result]
    if missing:
        logger.warning(f"没有兼容版本: {', '.join(missing)}")
    echo_json({mod_id: version.to_dict() for mod_id, version in result.items()})


@main.command()
@click.argument("mod_id")
@click.argument("version")
@query_options
@click.pass_obj
@handle_errors
def deps(config, mod_id, version, platforms, engine, prerelease):
    """解析指定版本的依赖闭包与不兼容声明"""
    query = build_query(config, platforms, engine, prerelease)
    orchestrator = load_orchestrator(config)

    report = orchestrator.get_version(mod_id, version, query)
    if report is None:
        raise click.ClickException(f"模组 {mod_id} 不存在版本 {version}")
    echo_json(report.to_dict())


@main.command()
@click.argument("mod_id")
@click.option("--constraint", help="版本约束，例如 >=1.2.0")
@click.option(
    "--status",
    type=click.Choice([s.value for s in VersionStatus]),
    default=VersionStatus.ACCEPTED.value,
    show_default=True,
)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--per-page", type=int, default=10, show_default=True)
@query_options
@click.pass_obj
@handle_errors
def versions(config, mod_id, constraint, status, page, per_page, platforms, engine, prerelease):
    """分页列出模组版本"""
    query = build_query(config, platforms, engine, prerelease)
    orchestrator = load_orchestrator(config)

    result = orchestrator.list_versions(
        mod_id,
        query,
        constraint=constraint,
        status=VersionStatus(status),
        page=page,
        per_page=per_page,
    )
    echo_json(result.to_dict())


if __name__ == "__main__":
    main()
