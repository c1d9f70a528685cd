"""
Notion Schemas - property names and page <-> record conversion.

The assistant works against three databases the user already has in
Notion. Their property names are Portuguese and fixed:

    Tasks:    Nome (title), Descrição (rich_text), Status (select),
              Prioridade (select), Data de Vencimento (date),
              Projeto (relation)
    Notes:    Título (title), Tags (multi_select), content as paragraph blocks
    Projects: Nome (title), Descrição (rich_text), Status (select),
              Data de Início (date), Data de Fim (date)

Reference: https://developers.notion.com/reference/page-property-values
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from alfred.environments.schemas import (
    Note,
    Priority,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
)

# Notion rejects rich_text items longer than this
MAX_TEXT_LENGTH = 2000

E = TypeVar("E", bound=Enum)


class TaskProperties:
    TITLE = "Nome"
    DESCRIPTION = "Descrição"
    STATUS = "Status"
    PRIORITY = "Prioridade"
    DUE_DATE = "Data de Vencimento"
    PROJECT = "Projeto"


class NoteProperties:
    TITLE = "Título"
    TAGS = "Tags"


class ProjectProperties:
    NAME = "Nome"
    DESCRIPTION = "Descrição"
    STATUS = "Status"
    START_DATE = "Data de Início"
    END_DATE = "Data de Fim"


# ---------------------------------------------------------------------------
# PROPERTY BUILDERS (record -> Notion)
# ---------------------------------------------------------------------------

def _text_chunks(text: str) -> List[Dict[str, Any]]:
    return [
        {"type": "text", "text": {"content": text[i:i + MAX_TEXT_LENGTH]}}
        for i in range(0, len(text), MAX_TEXT_LENGTH)
    ]


def title_property(text: str) -> Dict[str, Any]:
    return {"title": _text_chunks(text)}


def rich_text_property(text: str) -> Dict[str, Any]:
    return {"rich_text": _text_chunks(text)}


def select_property(name: str) -> Dict[str, Any]:
    return {"select": {"name": name}}


def multi_select_property(names: List[str]) -> Dict[str, Any]:
    return {"multi_select": [{"name": name} for name in names]}


def date_property(value: date) -> Dict[str, Any]:
    return {"date": {"start": value.isoformat()}}


def relation_property(page_ids: List[str]) -> Dict[str, Any]:
    return {"relation": [{"id": page_id} for page_id in page_ids]}


def paragraph_blocks(content: str) -> List[Dict[str, Any]]:
    """One paragraph block per non-empty line."""
    return [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": _text_chunks(line)},
        }
        for line in content.splitlines()
        if line.strip()
    ]


# ---------------------------------------------------------------------------
# PROPERTY PARSERS (Notion -> record)
# ---------------------------------------------------------------------------

def plain_text(prop: Optional[Dict[str, Any]]) -> str:
    """Concatenate the plain text of a title or rich_text property."""
    if not prop:
        return ""
    items = prop.get(prop.get("type", ""), None)
    if items is None:
        items = prop.get("title") or prop.get("rich_text") or []
    return "".join(item.get("plain_text") or item.get("text", {}).get("content", "") for item in items)


def select_name(prop: Optional[Dict[str, Any]]) -> Optional[str]:
    if not prop or not prop.get("select"):
        return None
    return prop["select"].get("name")


def multi_select_names(prop: Optional[Dict[str, Any]]) -> List[str]:
    if not prop:
        return []
    return [option["name"] for option in prop.get("multi_select") or [] if option.get("name")]


def date_start(prop: Optional[Dict[str, Any]]) -> Optional[date]:
    if not prop or not prop.get("date") or not prop["date"].get("start"):
        return None
    # start is either YYYY-MM-DD or a full ISO datetime
    return date.fromisoformat(prop["date"]["start"][:10])


def relation_ids(prop: Optional[Dict[str, Any]]) -> List[str]:
    if not prop:
        return []
    return [item["id"] for item in prop.get("relation") or [] if item.get("id")]


def enum_or_none(enum_cls: Type[E], value: Optional[str]) -> Optional[E]:
    """Map a select name onto an enum; options outside the enum become None."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def block_text(block: Dict[str, Any]) -> Optional[str]:
    """Plain text of a paragraph block, None for other block types."""
    if block.get("type") != "paragraph":
        return None
    return "".join(item.get("plain_text", "") for item in block["paragraph"].get("rich_text", []))


# ---------------------------------------------------------------------------
# PAGE CONVERSION
# ---------------------------------------------------------------------------

def page_to_task(page: Dict[str, Any]) -> Task:
    props = page.get("properties", {})
    projects = relation_ids(props.get(TaskProperties.PROJECT))
    return Task(
        id=page["id"],
        title=plain_text(props.get(TaskProperties.TITLE)),
        description=plain_text(props.get(TaskProperties.DESCRIPTION)) or None,
        status=enum_or_none(TaskStatus, select_name(props.get(TaskProperties.STATUS))),
        priority=enum_or_none(Priority, select_name(props.get(TaskProperties.PRIORITY))),
        due_date=date_start(props.get(TaskProperties.DUE_DATE)),
        project_id=projects[0] if projects else None,
        url=page.get("url"),
        created_at=page["created_time"],
        updated_at=page["last_edited_time"],
    )


def page_to_note(page: Dict[str, Any], content: str = "") -> Note:
    props = page.get("properties", {})
    return Note(
        id=page["id"],
        title=plain_text(props.get(NoteProperties.TITLE)),
        content=content,
        tags=multi_select_names(props.get(NoteProperties.TAGS)),
        url=page.get("url"),
        created_at=page["created_time"],
        updated_at=page["last_edited_time"],
    )


def page_to_project(page: Dict[str, Any]) -> Project:
    props = page.get("properties", {})
    return Project(
        id=page["id"],
        name=plain_text(props.get(ProjectProperties.NAME)),
        description=plain_text(props.get(ProjectProperties.DESCRIPTION)) or None,
        status=enum_or_none(ProjectStatus, select_name(props.get(ProjectProperties.STATUS))),
        start_date=date_start(props.get(ProjectProperties.START_DATE)),
        end_date=date_start(props.get(ProjectProperties.END_DATE)),
        url=page.get("url"),
        created_at=page["created_time"],
        updated_at=page["last_edited_time"],
    )
