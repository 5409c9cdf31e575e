"""
동기화 CLI 명령어

SyncOrchestrator를 실행하고 결과를 표로 출력합니다.
개별 계정/엔티티 종류의 실패는 결과에만 기록되며 종료 코드는 0입니다.
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from core.domain.entities import SyncResult, SyncStatus
from adapters.db.database import initialize_database
from adapters.factory import AdapterFactory
from config.adapters import get_config

# CLI 앱 생성
app = typer.Typer(name="sync", help="HubSpot 동기화 명령어")
console = Console()

STATUS_STYLES = {
    SyncStatus.SUCCESS: "green",
    SyncStatus.FAILED: "red",
    SyncStatus.SKIPPED: "yellow",
    SyncStatus.PROCESSING: "blue",
}


def render_results(results: List[SyncResult]) -> Table:
    """동기화 결과 표를 생성합니다."""
    table = Table(title="동기화 결과")
    table.add_column("포털 ID", style="cyan")
    table.add_column("엔티티", style="magenta")
    table.add_column("상태")
    table.add_column("조회", justify="right")
    table.add_column("이벤트", justify="right")
    table.add_column("오류", style="red")

    for result in results:
        style = STATUS_STYLES.get(result.status, "white")
        table.add_row(
            str(result.hub_id),
            result.entity_kind.value,
            f"[{style}]{result.status.value}[/{style}]",
            str(result.fetched_count),
            str(result.emitted_count),
            result.error_message or "",
        )
    return table


@app.command("run")
def run_sync(
    hub_id: Optional[List[int]] = typer.Option(None, "--hub-id", help="동기화할 포털 ID (여러 번 지정 가능)"),
):
    """등록된 모든 계정을 증분 동기화합니다."""

    async def _run():
        config = get_config()
        db_adapter = initialize_database(config)
        await db_adapter.initialize()

        try:
            async with db_adapter.get_session() as session:
                orchestrator = AdapterFactory(config).create_sync_orchestrator(session)
                return await orchestrator.run(hub_ids=hub_id or None)
        finally:
            await db_adapter.close()

    try:
        results = asyncio.run(_run())
    except Exception as e:
        console.print(f"[red]오류: {str(e)}[/red]")
        raise typer.Exit(1)

    if not results:
        console.print("[yellow]동기화할 계정이 없습니다.[/yellow]")
        return

    console.print(render_results(results))

    failed = [result for result in results if result.status != SyncStatus.SUCCESS]
    if failed:
        console.print(f"[yellow]실패/건너뜀 {len(failed)}건 (다음 실행에서 같은 구간부터 다시 조회)[/yellow]")
    else:
        console.print("[green]✓ 모든 동기화가 완료되었습니다![/green]")
