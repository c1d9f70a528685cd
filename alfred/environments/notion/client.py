"""
Notion API Client - tasks, notes and projects stored in Notion databases.

This client talks to the Notion REST API with httpx and maps pages onto
the domain records in alfred.environments.schemas.

Key Features:
=============
1. Paginated database queries (start_cursor / has_more)
2. Server-side filters for title, status, priority, project and tags
3. Note content read from and written as paragraph blocks
4. Status-code aware errors (NotFoundError, StoreValidationError, APIError)

API Reference:
==============
- Query a database: https://developers.notion.com/reference/post-database-query
- Pages: https://developers.notion.com/reference/post-page
- Block children: https://developers.notion.com/reference/get-block-children

Usage Example:
==============
    kb = NotionKnowledgeBase(
        token="secret_xxx",
        tasks_db_id="...",
        notes_db_id="...",
        projects_db_id="...",
    )
    tasks = await kb.search_tasks(status=TaskStatus.TODO)
    await kb.aclose()
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from alfred.environments.base import (
    APIError,
    ConfigurationError,
    KnowledgeBaseClient,
    NotFoundError,
    StoreValidationError,
)
from alfred.environments.notion.schemas import (
    NoteProperties,
    ProjectProperties,
    TaskProperties,
    block_text,
    date_property,
    multi_select_property,
    page_to_note,
    page_to_project,
    page_to_task,
    paragraph_blocks,
    relation_property,
    rich_text_property,
    select_property,
    title_property,
)
from alfred.environments.schemas import (
    Note,
    NoteCreate,
    Priority,
    Project,
    ProjectCreate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger("alfred.environments.notion")


class NotionKnowledgeBase(KnowledgeBaseClient):
    """
    Notion-backed knowledge base.

    Attributes:
        tasks_db_id: Database holding tasks
        notes_db_id: Database holding notes
        projects_db_id: Database holding projects

    A missing token or database id is reported as ConfigurationError on the
    first call that needs it, so the application can start unconfigured.
    """

    backend_name = "notion"

    BASE_URL = "https://api.notion.com/v1"
    PAGE_SIZE = 100
    # Notion allows about 3 requests per second per integration
    CONTENT_CONCURRENCY = 3

    def __init__(
        self,
        token: str,
        tasks_db_id: str = "",
        notes_db_id: str = "",
        projects_db_id: str = "",
        api_version: str = "2022-06-28",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.tasks_db_id = tasks_db_id
        self.notes_db_id = notes_db_id
        self.projects_db_id = projects_db_id
        self._http_client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": api_version,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self._content_semaphore = asyncio.Semaphore(self.CONTENT_CONCURRENCY)

    # -------------------------------------------------------------------------
    # HTTP CLIENT MANAGEMENT
    # -------------------------------------------------------------------------

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        """
        Make an authenticated request to the Notion API.

        Raises:
            ConfigurationError: If no integration token is configured
            NotFoundError: 404, or a page the integration cannot see
            StoreValidationError: 400 (bad property, bad filter...)
            APIError: Any other failure, including network errors
        """
        if not self.token:
            raise ConfigurationError("NOTION_TOKEN is not configured")

        try:
            response = await self._http_client.request(
                method=method,
                url=endpoint,
                json=json,
                params=params,
            )
        except httpx.RequestError as e:
            logger.error(f"Network error in Notion API: {e}")
            raise APIError(f"Network error: {e}")

        if response.status_code == 401:
            logger.error("Notion API: Unauthorized (integration token invalid)")
            raise APIError(
                "Unauthorized - integration token may be invalid",
                status_code=401,
                response=response.text,
            )

        if response.status_code == 404:
            raise NotFoundError(f"Notion object not found: {endpoint}")

        if response.status_code == 400:
            logger.warning(f"Notion API rejected request: {response.text}")
            raise StoreValidationError(f"Invalid request: {self._error_message(response)}")

        if response.status_code >= 300:
            error_detail = response.text
            logger.error(f"Notion API error: {response.status_code} - {error_detail}")
            raise APIError(
                f"API request failed: {self._error_message(response)}",
                status_code=response.status_code,
                response=error_detail,
            )

        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("message") or response.text
        except ValueError:
            return response.text

    @staticmethod
    def _require(db_id: str, setting: str) -> str:
        if not db_id:
            raise ConfigurationError(f"{setting} is not configured")
        return db_id

    async def _query_database(self, database_id: str, filter: Optional[dict] = None) -> List[dict]:
        """Return every page matching the filter, following pagination."""
        pages: List[dict] = []
        body: Dict[str, Any] = {"page_size": self.PAGE_SIZE}
        if filter:
            body["filter"] = filter

        while True:
            data = await self._make_request("POST", f"/databases/{database_id}/query", json=body)
            pages.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            body["start_cursor"] = data["next_cursor"]

        logger.debug(f"Queried database {database_id}: {len(pages)} pages")
        return pages

    @staticmethod
    def _combine(conditions: List[dict]) -> Optional[dict]:
        # A single condition must not be wrapped in a compound filter
        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return {"and": conditions}

    async def aclose(self) -> None:
        await self._http_client.aclose()

    # -------------------------------------------------------------------------
    # TASKS
    # -------------------------------------------------------------------------

    async def create_task(self, data: TaskCreate) -> Task:
        database_id = self._require(self.tasks_db_id, "NOTION_TASKS_DB_ID")

        properties = {
            TaskProperties.TITLE: title_property(data.title),
            TaskProperties.STATUS: select_property(data.status.value),
            TaskProperties.PRIORITY: select_property(data.priority.value),
        }
        if data.description:
            properties[TaskProperties.DESCRIPTION] = rich_text_property(data.description)
        if data.due_date:
            properties[TaskProperties.DUE_DATE] = date_property(data.due_date)
        if data.project_id:
            properties[TaskProperties.PROJECT] = relation_property([data.project_id])

        page = await self._make_request(
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )
        logger.info(f"Created Notion task {page['id']}")
        return page_to_task(page)

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        properties: Dict[str, Any] = {}
        if changes.title:
            properties[TaskProperties.TITLE] = title_property(changes.title)
        if changes.description:
            properties[TaskProperties.DESCRIPTION] = rich_text_property(changes.description)
        if changes.status:
            properties[TaskProperties.STATUS] = select_property(changes.status.value)
        if changes.priority:
            properties[TaskProperties.PRIORITY] = select_property(changes.priority.value)
        if changes.due_date:
            properties[TaskProperties.DUE_DATE] = date_property(changes.due_date)

        if not properties:
            page = await self._make_request("GET", f"/pages/{task_id}")
        else:
            page = await self._make_request("PATCH", f"/pages/{task_id}", json={"properties": properties})
            logger.info(f"Updated Notion task {task_id}: {sorted(properties)}")
        return page_to_task(page)

    async def search_tasks(
        self,
        title: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        project_id: Optional[str] = None,
    ) -> List[Task]:
        database_id = self._require(self.tasks_db_id, "NOTION_TASKS_DB_ID")

        conditions = []
        if title:
            conditions.append({"property": TaskProperties.TITLE, "title": {"contains": title}})
        if status:
            conditions.append({"property": TaskProperties.STATUS, "select": {"equals": status.value}})
        if priority:
            conditions.append({"property": TaskProperties.PRIORITY, "select": {"equals": priority.value}})
        if project_id:
            conditions.append({"property": TaskProperties.PROJECT, "relation": {"contains": project_id}})

        pages = await self._query_database(database_id, self._combine(conditions))
        return [page_to_task(page) for page in pages]

    # -------------------------------------------------------------------------
    # NOTES
    # -------------------------------------------------------------------------

    async def create_note(self, data: NoteCreate) -> Note:
        database_id = self._require(self.notes_db_id, "NOTION_NOTES_DB_ID")

        properties = {NoteProperties.TITLE: title_property(data.title)}
        if data.tags:
            properties[NoteProperties.TAGS] = multi_select_property(data.tags)

        body: Dict[str, Any] = {"parent": {"database_id": database_id}, "properties": properties}
        children = paragraph_blocks(data.content)
        if children:
            body["children"] = children

        page = await self._make_request("POST", "/pages", json=body)
        logger.info(f"Created Notion note {page['id']}")
        return page_to_note(page, content=data.content)

    async def _get_page_content(self, page_id: str) -> str:
        """Join the text of a page's paragraph blocks, one line per block."""
        lines: List[str] = []
        params: Dict[str, Any] = {"page_size": self.PAGE_SIZE}

        while True:
            data = await self._make_request("GET", f"/blocks/{page_id}/children", params=params)
            for block in data.get("results", []):
                text = block_text(block)
                if text is not None:
                    lines.append(text)
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            params["start_cursor"] = data["next_cursor"]

        return "\n".join(lines)

    async def _page_to_note_with_content(self, page: dict) -> Note:
        async with self._content_semaphore:
            content = await self._get_page_content(page["id"])
        return page_to_note(page, content=content)

    async def search_notes(
        self,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
        include_content: bool = True,
    ) -> List[Note]:
        """
        Query the notes database, filtering tags server-side.

        Bodies cost one block-children request per note, made at most
        CONTENT_CONCURRENCY at a time. A failed body request fails the search.
        """
        database_id = self._require(self.notes_db_id, "NOTION_NOTES_DB_ID")

        conditions = [
            {"property": NoteProperties.TAGS, "multi_select": {"contains": tag}}
            for tag in tags or []
        ]
        pages = await self._query_database(database_id, self._combine(conditions))
        if include_content:
            notes = await asyncio.gather(*(self._page_to_note_with_content(page) for page in pages))
        else:
            notes = [page_to_note(page) for page in pages]

        if not query:
            return list(notes)

        needle = query.casefold()
        return [
            note for note in notes
            if needle in note.title.casefold()
            or needle in note.content.casefold()
            or any(needle in tag.casefold() for tag in note.tags)
        ]

    # -------------------------------------------------------------------------
    # PROJECTS
    # -------------------------------------------------------------------------

    async def create_project(self, data: ProjectCreate) -> Project:
        database_id = self._require(self.projects_db_id, "NOTION_PROJECTS_DB_ID")

        properties = {
            ProjectProperties.NAME: title_property(data.name),
            ProjectProperties.STATUS: select_property(data.status.value),
        }
        if data.description:
            properties[ProjectProperties.DESCRIPTION] = rich_text_property(data.description)
        if data.start_date:
            properties[ProjectProperties.START_DATE] = date_property(data.start_date)
        if data.end_date:
            properties[ProjectProperties.END_DATE] = date_property(data.end_date)

        page = await self._make_request(
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )
        logger.info(f"Created Notion project {page['id']}")
        return page_to_project(page)

    async def list_projects(self) -> List[Project]:
        database_id = self._require(self.projects_db_id, "NOTION_PROJECTS_DB_ID")
        pages = await self._query_database(database_id)
        return [page_to_project(page) for page in pages]
