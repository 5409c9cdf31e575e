"""
계정 관리 CLI 명령어

HubSpot 계정 등록, 조회, 워터마크 초기화, 삭제를 CLI 명령으로 노출하는 어댑터입니다.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from core.domain.entities import EntityKind
from adapters.db.database import initialize_database
from adapters.factory import AdapterFactory
from config.adapters import get_config

# CLI 앱 생성
app = typer.Typer(name="account", help="HubSpot 계정 관리 명령어")
console = Console()


@app.command("register")
def register_account(
    hub_id: int = typer.Argument(..., help="HubSpot 포털 ID"),
    refresh_token: str = typer.Option(..., prompt=True, hide_input=True, help="OAuth 리프레시 토큰"),
):
    """HubSpot 계정을 등록합니다. 이미 있으면 리프레시 토큰을 교체합니다."""

    async def _register():
        try:
            # 설정 및 데이터베이스 초기화
            config = get_config()
            db_adapter = initialize_database(config)
            await db_adapter.initialize()

            async with db_adapter.get_session() as session:
                repository = AdapterFactory(config).create_account_repository(session)
                account = await repository.register(hub_id, refresh_token)

                console.print("[green]✓ 계정이 성공적으로 등록되었습니다![/green]")
                console.print(f"포털 ID: {account.hub_id}")

            await db_adapter.close()

        except Exception as e:
            console.print(f"[red]오류: {str(e)}[/red]")
            raise typer.Exit(1)

    asyncio.run(_register())


@app.command("list")
def list_accounts():
    """등록된 계정과 엔티티 종류별 워터마크를 조회합니다."""

    async def _list():
        try:
            config = get_config()
            db_adapter = initialize_database(config)
            await db_adapter.initialize()

            async with db_adapter.get_session() as session:
                repository = AdapterFactory(config).create_account_repository(session)
                accounts = await repository.list_all()

                if not accounts:
                    console.print("[yellow]등록된 계정이 없습니다.[/yellow]")
                    return

                table = Table(title="HubSpot 계정 목록")
                table.add_column("포털 ID", style="cyan")
                table.add_column("토큰 만료", style="yellow")
                for kind in EntityKind:
                    table.add_column(kind.value, style="green")

                for account in accounts:
                    expires_at = account.expires_at.strftime("%Y-%m-%d %H:%M:%S") if account.expires_at else "-"
                    watermarks = [
                        account.last_pulled_dates[kind.value].strftime("%Y-%m-%d %H:%M:%S")
                        if kind.value in account.last_pulled_dates else "-"
                        for kind in EntityKind
                    ]
                    table.add_row(str(account.hub_id), expires_at, *watermarks)

                console.print(table)

            await db_adapter.close()

        except Exception as e:
            console.print(f"[red]오류: {str(e)}[/red]")
            raise typer.Exit(1)

    asyncio.run(_list())


@app.command("reset-watermark")
def reset_watermark(
    hub_id: int = typer.Argument(..., help="HubSpot 포털 ID"),
    kind: Optional[str] = typer.Option(None, help="엔티티 종류 (companies, contacts, meetings). 없으면 전체"),
):
    """워터마크를 초기화하여 다음 동기화에서 전체를 다시 조회합니다."""

    if kind is not None:
        try:
            kind = EntityKind(kind).value
        except ValueError:
            console.print("[red]오류: 잘못된 엔티티 종류입니다. (companies, contacts, meetings)[/red]")
            raise typer.Exit(1)

    async def _reset():
        try:
            config = get_config()
            db_adapter = initialize_database(config)
            await db_adapter.initialize()

            async with db_adapter.get_session() as session:
                repository = AdapterFactory(config).create_account_repository(session)
                found = await repository.reset_watermark(hub_id, kind)

            await db_adapter.close()

            if not found:
                console.print(f"[red]계정을 찾을 수 없습니다: {hub_id}[/red]")
                raise typer.Exit(1)

            console.print(f"[green]✓ 워터마크가 초기화되었습니다: {hub_id} ({kind or '전체'})[/green]")

        except typer.Exit:
            raise
        except Exception as e:
            console.print(f"[red]오류: {str(e)}[/red]")
            raise typer.Exit(1)

    asyncio.run(_reset())


@app.command("remove")
def remove_account(
    hub_id: int = typer.Argument(..., help="HubSpot 포털 ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="확인 없이 진행"),
):
    """계정과 저장된 토큰, 워터마크를 삭제합니다."""

    if not yes:
        confirm = typer.confirm(f"계정 {hub_id}이(가) 삭제됩니다. 계속하시겠습니까?")
        if not confirm:
            console.print("[yellow]취소되었습니다.[/yellow]")
            return

    async def _remove():
        try:
            config = get_config()
            db_adapter = initialize_database(config)
            await db_adapter.initialize()

            async with db_adapter.get_session() as session:
                repository = AdapterFactory(config).create_account_repository(session)
                found = await repository.delete(hub_id)

            await db_adapter.close()

            if not found:
                console.print(f"[red]계정을 찾을 수 없습니다: {hub_id}[/red]")
                raise typer.Exit(1)

            console.print(f"[green]✓ 계정이 삭제되었습니다: {hub_id}[/green]")

        except typer.Exit:
            raise
        except Exception as e:
            console.print(f"[red]오류: {str(e)}[/red]")
            raise typer.Exit(1)

    asyncio.run(_remove())
