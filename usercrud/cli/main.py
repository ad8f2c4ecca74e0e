import json
from typing import Annotated, Optional

import httpx
import typer
import uvicorn
from rich import print_json
from rich.console import Console
from rich.table import Table
from typer import Typer

from usercrud.config import get_settings

app = Typer(help="Users API server and client")
console = Console()


def _base_url(url: str | None) -> str:
    if url:
        return url.rstrip("/")
    settings = get_settings()
    return f"http://{settings.host}:{settings.port}{settings.api_prefix}"


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option(help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option(help="Bind port")] = None,
    reload: Annotated[bool, typer.Option(help="Reload on code change")] = False,
):
    """啟動 Users API 伺服器"""
    settings = get_settings()
    uvicorn.run(
        "usercrud.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command(name="list")
def list_users(
    page_number: Annotated[int, typer.Option("--page", help="Page number")] = 1,
    page_size: Annotated[int, typer.Option("--size", help="Page size")] = 10,
    url: Annotated[Optional[str], typer.Option(help="API base URL")] = None,
):
    """列出一頁使用者"""
    resp = httpx.get(
        f"{_base_url(url)}/users",
        params={"pageNumber": page_number, "pageSize": page_size},
        headers={"Accept": "application/json"},
    )
    resp.raise_for_status()
    pagination = json.loads(resp.headers["X-Pagination"])

    table = Table(
        title=f"Users (page {pagination['currentPage']}/{pagination['totalPages']}, "
        f"total {pagination['totalCount']})"
    )
    for column in ("id", "login", "fullName", "createdAt"):
        table.add_column(column)
    for user in resp.json():
        table.add_row(*(str(user.get(c) or "") for c in ("id", "login", "fullName", "createdAt")))
    console.print(table)


@app.command()
def create(
    login: Annotated[str, typer.Option(help="Letters and digits only")],
    first_name: Annotated[str, typer.Option(help="First name")] = "John",
    last_name: Annotated[str, typer.Option(help="Last name")] = "Doe",
    url: Annotated[Optional[str], typer.Option(help="API base URL")] = None,
):
    """建立使用者並印出新 id"""
    resp = httpx.post(
        f"{_base_url(url)}/users",
        json={"login": login, "firstName": first_name, "lastName": last_name},
        headers={"Accept": "application/json"},
    )
    if resp.status_code == 422:
        print_json(data=resp.json())
        raise typer.Exit(code=1)
    resp.raise_for_status()
    console.print(resp.json())
