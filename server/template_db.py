"""SQLite storage for templates."""

import os
import sqlite3
from pathlib import Path

from composer.models.template import Template


DEFAULT_DB_PATH = Path(__file__).parent / "data" / "templates.db"
TEMPLATE_DB_PATH = Path(os.getenv("TEMPLATE_DB_PATH", str(DEFAULT_DB_PATH)))


def _connect() -> sqlite3.Connection:
    TEMPLATE_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(TEMPLATE_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    with _connect() as conn:
        conn.execute(
            """
            create table if not exists templates (
                template_id text primary key,
                template_json text not null,
                name text not null,
                kind text not null,
                created_at text not null,
                updated_at text not null
            )
            """
        )
        conn.execute(
            "create index if not exists idx_templates_kind on templates(kind)"
        )
        conn.commit()


def upsert_template(template: Template) -> None:
    """insert or update a template."""
    with _connect() as conn:
        conn.execute(
            """
            insert into templates (template_id, template_json, name, kind, created_at, updated_at)
            values (?, ?, ?, ?, ?, ?)
            on conflict(template_id) do update set
                template_json = excluded.template_json,
                name = excluded.name,
                kind = excluded.kind,
                updated_at = excluded.updated_at
            """,
            (
                template.template_id,
                template.model_dump_json(),
                template.name,
                template.kind.value,
                template.created_at,
                template.updated_at,
            ),
        )
        conn.commit()


def get_template(template_id: str) -> Template | None:
    with _connect() as conn:
        row = conn.execute(
            "select template_json from templates where template_id = ?",
            (template_id,),
        ).fetchone()
    if not row:
        return None
    return Template.model_validate_json(row["template_json"])


def list_templates(kind: str | None = None) -> list[Template]:
    with _connect() as conn:
        if kind is None:
            rows = conn.execute(
                "select template_json from templates order by updated_at desc"
            ).fetchall()
        else:
            rows = conn.execute(
                "select template_json from templates where kind = ? order by updated_at desc",
                (kind,),
            ).fetchall()
    return [Template.model_validate_json(row["template_json"]) for row in rows]


def delete_template(template_id: str) -> None:
    with _connect() as conn:
        conn.execute("delete from templates where template_id = ?", (template_id,))
        conn.commit()
